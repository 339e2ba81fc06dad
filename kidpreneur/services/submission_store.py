"""Persist idea submissions as plain directories on disk.

Layout of a stored submission::

    <root>/<id>/metadata.txt
    <root>/<id>/Attachments/<sanitized-filename>

A submission is assembled under a hidden staging directory and renamed into
place once the metadata and every attachment are written, so a failed store
leaves nothing behind under ``<root>/<id>``.
"""

import logging
import os
import re
import shutil
import uuid
from pathlib import Path
from typing import Iterable, Mapping, Optional

from ..utils.file_handler import UploadedFile

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.txt"
ATTACHMENTS_DIRNAME = "Attachments"
STAGING_PREFIX = ".staging-"
MAX_FILENAME_LENGTH = 200

# Form field keys mapped to the labels written in metadata.txt
FIELD_LABELS = {
    "fullName": "Name",
    "contact": "Contact",
    "city": "City",
    "country": "Country",
    "grade": "Grade",
    "field": "Field",
    "ideaTitle": "Title",
    "ideaDesc": "Description",
}

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(name: Optional[str]) -> str:
    safe_name = _UNSAFE_FILENAME_CHARS.sub("_", name or "")[
        :MAX_FILENAME_LENGTH
    ]
    # "." and ".." would resolve outside the attachments folder
    if not safe_name.strip("."):
        return "file"
    return safe_name


def render_metadata(fields: Mapping[str, str]) -> str:
    return "\n".join(
        f"{FIELD_LABELS.get(key, key)}: {value}"
        for key, value in fields.items()
    )


def _move_attachment(upload: UploadedFile, attachments_dir: Path) -> Path:
    dest = attachments_dir / sanitize_filename(upload.original_filename)
    if dest.exists():
        dest.unlink()
    shutil.move(str(upload.filepath), str(dest))
    return dest


def store_submission(
    root: Path,
    fields: Mapping[str, str],
    files: Optional[Iterable[UploadedFile]] = None,
) -> str:
    """Write a new submission under ``root`` and return its id.

    Each temporary file in ``files`` is moved, not copied, into the
    submission's attachments folder. Any OSError removes the partially built
    submission and is re-raised; files not yet moved stay where they were.
    """
    submission_id = str(uuid.uuid4())
    root = Path(root)
    staging_dir = root / f"{STAGING_PREFIX}{submission_id}"
    attachments_dir = staging_dir / ATTACHMENTS_DIRNAME

    try:
        os.makedirs(attachments_dir)
        (staging_dir / METADATA_FILENAME).write_text(
            render_metadata(fields), encoding="utf-8"
        )

        moved = 0
        for upload in files or []:
            _move_attachment(upload, attachments_dir)
            moved += 1

        os.rename(staging_dir, root / submission_id)
    except OSError:
        shutil.rmtree(staging_dir, ignore_errors=True)
        raise

    logger.info(
        "Stored submission %s with %d attachment(s)", submission_id, moved
    )
    return submission_id


def init_storage(root: Path) -> None:
    """Create the submissions root and drop staging dirs left by a crash."""
    root = Path(root)
    os.makedirs(root, exist_ok=True)
    for entry in root.iterdir():
        if entry.name.startswith(STAGING_PREFIX) and entry.is_dir():
            logger.warning("Removing stale staging directory %s", entry)
            shutil.rmtree(entry, ignore_errors=True)
