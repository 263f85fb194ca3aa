from pydantic import BaseModel, Field


class RoomRequest(BaseModel):
    room: str = Field(min_length=1, max_length=128)


class RoomMessage(RoomRequest):
    content: str = Field(min_length=1, max_length=2000)
