from __future__ import annotations


class AdapterError(Exception):
    """Base class for errors raised by the Web PubSub client manager."""


class NotSupportedError(AdapterError):
    """The operation has no meaning when rooms live in Web PubSub groups."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} is not supported.")
        self.operation = operation


class FeatureNotImplementedError(AdapterError, NotImplementedError):
    """The operation is planned but not available yet."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} is not implemented. This feature will be available in a further version.")
        self.operation = operation
