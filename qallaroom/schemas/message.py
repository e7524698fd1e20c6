import secrets
import time
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAX_TEXT_LENGTH = 2000
MAX_URL_LENGTH = 400

MessageKind = Literal["text", "sticker"]


def new_message_id(ts: int) -> str:
    """Time-prefixed id: sortable by creation time without a shared counter."""
    return f"{ts}-{secrets.token_hex(6)}"


def now_ms() -> int:
    return int(time.time() * 1000)


class Message(BaseModel):
    """A chat message as stored in channel history and broadcast to clients.

    Exactly one of ``text`` / ``url`` is populated, chosen by ``type``;
    the other is always the empty string.
    """

    id: str
    channel_id: str = Field(alias="channelId")
    user: str
    color: str
    type: MessageKind
    text: str = Field("", max_length=MAX_TEXT_LENGTH)
    url: str = Field("", max_length=MAX_URL_LENGTH)
    ts: int

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def exactly_one_body(self) -> "Message":
        if self.type == "text" and (not self.text or self.url):
            raise ValueError("Text message must have text and no url")
        if self.type == "sticker" and (not self.url or self.text):
            raise ValueError("Sticker message must have a url and no text")
        return self

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
