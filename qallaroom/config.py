from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "TheQallaRoom Server"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # Shared invite secret. Empty string disables the check (open server).
    INVITE_CODE: str = ""

    # In-memory relay limits
    HISTORY_LIMIT: int = 200
    VOICE_ROOM_CAPACITY: int = 4

    # Sticker uploads
    UPLOAD_DIR: str = "./uploads/stickers"
    MAX_UPLOAD_SIZE: int = 2 * 1024 * 1024  # 2 MB
    ALLOWED_MIME_TYPES: list[str] = [
        "image/png",
        "image/webp",
        "image/gif",
    ]

    model_config = {"env_file": ".env"}

    @property
    def invite_code(self) -> str:
        return self.INVITE_CODE.strip()


settings = Settings()
