"""Validation helpers for multipart uploads."""

from fastapi import HTTPException, UploadFile

DOCUMENT_MIME_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
})


def validate_upload_filename(filename: str) -> None:
    if not filename or len(filename) > 200:
        raise HTTPException(status_code=400, detail="invalid filename")
    if "/" in filename or "\\" in filename:
        raise HTTPException(status_code=400, detail="invalid filename path")


def read_upload(file: UploadFile, max_bytes: int) -> bytes:
    """Read at most `max_bytes`; a longer payload is rejected with 400."""
    payload = file.file.read(max_bytes + 1)
    if len(payload) > max_bytes:
        raise HTTPException(status_code=400, detail=f"file too large (max {format_kb(max_bytes)})")
    if not payload:
        raise HTTPException(status_code=400, detail="empty file")
    return payload


def read_image_upload(file: UploadFile, max_bytes: int) -> bytes:
    validate_upload_filename(file.filename)
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed!")
    return read_upload(file, max_bytes)


def read_document_upload(file: UploadFile, max_bytes: int) -> bytes:
    validate_upload_filename(file.filename)
    if file.content_type not in DOCUMENT_MIME_TYPES:
        raise HTTPException(status_code=400, detail="Only PDF, Word, and Excel files are allowed!")
    return read_upload(file, max_bytes)


def format_kb(size: int) -> str:
    return f"{size / 1024:.2f} KB"
