"""Socket.IO rooms delegated to Azure Web PubSub groups."""

from .adapter import WebPubSubManager  # noqa: F401
from .exceptions import AdapterError, FeatureNotImplementedError, NotSupportedError  # noqa: F401
from .options import BroadcastOptions  # noqa: F401
from .server import create_client_manager, create_socket_app, sio  # noqa: F401
