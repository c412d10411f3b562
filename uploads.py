"""File upload storage for multipart requests.

Files are written to UPLOAD_FOLDER under a millisecond-timestamp prefix and
described to clients as ``{name, url, uploaded_date}``.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from flask import current_app, request
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from database import get_store
from errors import ValidationError

logger = logging.getLogger(__name__)


def _upload_dir() -> Path:
    folder = Path(current_app.config["UPLOAD_FOLDER"])
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def save_file(file: FileStorage) -> dict:
    """Persist one uploaded file and return its public description."""
    original = file.filename or ""
    safe = secure_filename(original)
    if not safe:
        raise ValidationError("Uploaded file has no usable name")

    ext = Path(safe).suffix.lower()
    allowed = current_app.config.get("ALLOWED_UPLOAD_EXTENSIONS", set())
    if allowed and ext not in allowed:
        raise ValidationError(f"File type {ext or '(none)'} is not allowed")

    store = get_store()
    # Same name in the same millisecond must not collide
    stored_name = f"{int(time.time() * 1000)}-{store.new_id()[:8]}-{safe}"
    file.save(_upload_dir() / stored_name)
    logger.info("Stored upload %s as %s", original, stored_name)
    return {
        "name": original,
        "url": f"/uploads/{stored_name}",
        "uploaded_date": store.now(),
    }


def save_single(field: str) -> dict | None:
    file = request.files.get(field)
    if file is None or not file.filename:
        return None
    return save_file(file)


def save_many(field: str) -> list[dict]:
    files = [f for f in request.files.getlist(field) if f.filename]
    limit = current_app.config.get("MAX_FILES_PER_UPLOAD", 10)
    if len(files) > limit:
        raise ValidationError(f"At most {limit} files can be uploaded at once")
    return [save_file(f) for f in files]
