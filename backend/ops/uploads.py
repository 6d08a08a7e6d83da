# ops/uploads.py
"""
Upload storage.

Files are written through Django's default storage under UPLOAD_DIR with a
random name that keeps the original extension. Callers embed the returned
"/uploads/<name>" path in their records.
"""

import logging
import os
import uuid
from typing import Iterable, List

from django.conf import settings
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)


def _upload_name(original_name: str) -> str:
    extension = os.path.splitext(original_name or "")[1].lstrip(".").lower()
    name = uuid.uuid4().hex
    return f"{name}.{extension}" if extension else name


def save_upload(uploaded_file) -> str:
    """Store one uploaded file and return its public relative path."""
    name = _upload_name(getattr(uploaded_file, "name", ""))
    stored = default_storage.save(f"{settings.UPLOAD_DIR}/{name}", uploaded_file)
    path = "/uploads/" + os.path.basename(stored)
    logger.debug("Stored upload", extra={"path": path, "size": getattr(uploaded_file, "size", None)})
    return path


def save_uploads(files: Iterable) -> List[str]:
    """
    Store several files, preserving their order.

    If one of them fails, the ones already written are removed before the
    error propagates.
    """
    paths = []
    try:
        for f in files:
            paths.append(save_upload(f))
    except Exception:
        delete_uploads(paths)
        raise
    return paths


def delete_uploads(paths: Iterable[str]) -> None:
    """Remove stored files given their "/uploads/<name>" paths."""
    for path in paths:
        name = f"{settings.UPLOAD_DIR}/{os.path.basename(path)}"
        default_storage.delete(name)
        logger.debug("Deleted upload", extra={"path": path})
