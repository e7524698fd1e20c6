from pydantic import BaseModel


class StickerUploadResponse(BaseModel):
    ok: bool = True
    url: str
