"""Classification of uploaded week files into photo, video and pdf."""
import mimetypes
from typing import Optional

FILE_TYPE_PHOTO = "photo"
FILE_TYPE_VIDEO = "video"
FILE_TYPE_PDF = "pdf"

GENERIC_CONTENT_TYPES = {"", "application/octet-stream"}


def resolve_content_type(content_type: Optional[str], filename: Optional[str]) -> str:
    """Declared content type, or a guess from the file name when the client sent none."""
    declared = (content_type or "").split(";")[0].strip().lower()
    if declared not in GENERIC_CONTENT_TYPES:
        return declared
    guessed, _ = mimetypes.guess_type(filename or "")
    return (guessed or declared).lower()


def categorize(content_type: Optional[str], filename: Optional[str] = None) -> Optional[str]:
    """Map a MIME type to photo/video/pdf. None means the file is not supported."""
    mime = resolve_content_type(content_type, filename)
    if mime.startswith("image/"):
        return FILE_TYPE_PHOTO
    if mime.startswith("video/"):
        return FILE_TYPE_VIDEO
    if mime == "application/pdf":
        return FILE_TYPE_PDF
    return None
