from pydantic import BaseModel


class VoiceRoomResponse(BaseModel):
    room: str
    peers: list[str]
