"""Blob storage for submitted files.

Files are written below ``UPLOAD_DIR`` and served back through
``/uploads/{path}``.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import Optional
from uuid import uuid4

from ..core.config import UPLOAD_DIR
from ..core.logging import get_logger
from .errors import NotFoundError, ValidationError

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(name: str) -> str:
    """Reduce an uploaded file name to a single safe path component."""

    base = PurePosixPath((name or "").replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "upload"


def _resolve(path: str, root: Path) -> Path:
    root = root.resolve()
    target = (root / path).resolve()
    if target != root and root not in target.parents:
        raise ValidationError("Invalid storage path")
    return target


def upload_file(data: bytes, path: str, root: Path | None = None) -> str:
    """Store ``data`` at ``path`` and return its durable URL."""

    root = root or UPLOAD_DIR
    destination = _resolve(path, root)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(data)
    logger.info("file_stored", path=path, size=len(data))
    return f"/uploads/{path}"


def submission_path(user_id: str, task_id: int, filename: str) -> str:
    """Return a new, unique storage path for an uploaded submission file."""

    return f"submissions/{user_id}/{task_id}/{uuid4().hex}/{safe_filename(filename)}"


def submission_owner(path: str, root: Path | None = None) -> Optional[str]:
    """Return the uploader id encoded in a submission path, if any."""

    root = (root or UPLOAD_DIR).resolve()
    parts = _resolve(path, root).relative_to(root).parts
    if len(parts) >= 2 and parts[0] == "submissions":
        return parts[1]
    return None


def delete_file(path: str, root: Path | None = None) -> None:
    """Remove a stored file; missing files are ignored."""

    target = _resolve(path, root or UPLOAD_DIR)
    target.unlink(missing_ok=True)
    logger.info("file_deleted", path=path)


def resolve_upload(path: str, root: Path | None = None) -> Path:
    """Locate a stored file for serving."""

    target = _resolve(path, root or UPLOAD_DIR)
    if not target.is_file():
        raise NotFoundError("File not found")
    return target


__all__ = [
    "delete_file",
    "resolve_upload",
    "safe_filename",
    "submission_owner",
    "submission_path",
    "upload_file",
]
