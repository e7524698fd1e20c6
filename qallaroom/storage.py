"""Local disk storage for uploaded stickers.

Abstraction layer: swap this module to add S3/MinIO support later.
"""

import os
import uuid

EXTENSIONS = {
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def _uuid_filename(content_type: str | None) -> str:
    """Return a UUID-based filename with an extension derived from the MIME type."""
    return f"{uuid.uuid4().hex}{EXTENSIONS.get(content_type or '', '')}"


def save_upload(content: bytes, content_type: str | None, upload_dir: str) -> tuple[str, str]:
    """Write *content* to *upload_dir* with a UUID filename.

    Returns:
        (stored_filename, full_path)
    """
    os.makedirs(upload_dir, exist_ok=True)
    stored = _uuid_filename(content_type)
    full_path = os.path.join(upload_dir, stored)
    with open(full_path, "wb") as fh:
        fh.write(content)
    return stored, full_path
