from pydantic import BaseModel, ConfigDict, Field

from qallaroom.schemas.message import Message


class Channel(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(frozen=True)


class HistoryResponse(BaseModel):
    channel_id: str = Field(alias="channelId")
    messages: list[Message]

    model_config = ConfigDict(populate_by_name=True)
