from fastapi import APIRouter, File, HTTPException, UploadFile, status

from qallaroom.config import settings
from qallaroom.schemas.sticker import StickerUploadResponse
from qallaroom.storage import save_upload

router = APIRouter(prefix="/stickers", tags=["stickers"])

STICKER_URL_PREFIX = "/stickers"


@router.post("/upload", response_model=StickerUploadResponse)
async def upload_sticker(sticker: UploadFile | None = File(None)) -> StickerUploadResponse:
    """Store a sticker image and return the relative URL it is served from."""
    if sticker is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    # Validate MIME type before reading the body
    if sticker.content_type not in settings.ALLOWED_MIME_TYPES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"File type '{sticker.content_type}' is not allowed",
        )

    content = await sticker.read(settings.MAX_UPLOAD_SIZE + 1)

    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {settings.MAX_UPLOAD_SIZE // (1024 * 1024)} MB limit",
        )

    stored_filename, _ = save_upload(
        content=content,
        content_type=sticker.content_type,
        upload_dir=settings.UPLOAD_DIR,
    )
    return StickerUploadResponse(url=f"{STICKER_URL_PREFIX}/{stored_filename}")
