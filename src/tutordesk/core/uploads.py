"""Disk storage for proof-of-payment images."""

import os
import time
import uuid
from pathlib import Path

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from tutordesk.core.logging import get_logger

logger = get_logger(__name__)


def get_upload_dir() -> Path:
    """Directory uploads are written to (UPLOAD_DIR, default ./uploads)."""
    return Path(os.getenv("UPLOAD_DIR", "uploads"))


def build_upload_name(original_filename: str, timestamp_ms: int | None = None) -> str:
    """Name a stored file as <epoch millis>-<original filename>."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    # Drop any client-supplied directory components
    safe_name = Path(original_filename.replace("\\", "/")).name or "upload"
    return f"{timestamp_ms}-{safe_name}"


def _write_new_file(upload_dir: Path, name: str, content: bytes) -> Path:
    """
    Create the file without ever replacing an existing one.

    A name already taken (same filename in the same millisecond) gets a short
    random suffix before the extension.
    """
    upload_dir.mkdir(parents=True, exist_ok=True)
    destination = upload_dir / name
    try:
        with destination.open("xb") as fh:
            fh.write(content)
    except FileExistsError:
        stem, suffix = destination.stem, destination.suffix
        destination = upload_dir / f"{stem}-{uuid.uuid4().hex[:8]}{suffix}"
        with destination.open("xb") as fh:
            fh.write(content)
    return destination


async def save_upload(file: UploadFile) -> str:
    """
    Write an uploaded file to the upload directory.

    Returns:
        Path of the stored file, relative to the working directory when
        UPLOAD_DIR is relative
    """
    content = await file.read()
    destination = await run_in_threadpool(
        _write_new_file,
        get_upload_dir(),
        build_upload_name(file.filename or "upload"),
        content,
    )

    logger.info(
        "upload.saved",
        path=str(destination),
        size_bytes=len(content),
        content_type=file.content_type,
    )
    return destination.as_posix()


def delete_upload(path: str) -> None:
    """Remove a stored upload, ignoring files that are already gone."""
    try:
        Path(path).unlink()
    except FileNotFoundError:
        logger.warning("upload.missing", path=path)
