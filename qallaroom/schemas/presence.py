from pydantic import BaseModel, ConfigDict


class PresenceEntry(BaseModel):
    """Public projection of a session, as shown in the roster."""

    id: str
    name: str
    color: str

    model_config = ConfigDict(frozen=True)
