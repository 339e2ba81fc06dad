import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from starlette.datastructures import UploadFile


class FileTooLargeError(Exception):
    """Raised when an upload exceeds the configured maximum size."""


@dataclass
class UploadedFile:
    """A parsed upload sitting in a temporary location.

    Whoever holds the record owns ``filepath`` and is responsible for
    moving or deleting it.
    """

    original_filename: Optional[str]
    filepath: Path


def save_upload_file(
    upload_file: UploadFile, tmp_dir: Path, max_file_size: int
) -> UploadedFile:
    """Spool an uploaded part to a temporary file and return its record"""
    file_size = 0
    chunk_size = 1024 * 1024  # 1MB

    # Size is known once the form parser has spooled the part
    if upload_file.size is not None and upload_file.size > max_file_size:
        raise FileTooLargeError("File too large")

    os.makedirs(tmp_dir, exist_ok=True)

    # Keep the extension so the temporary file stays recognisable
    file_extension = os.path.splitext(upload_file.filename or "")[1]
    unique_filename = f"upload_{uuid.uuid4().hex}{file_extension}"
    file_path = Path(tmp_dir) / unique_filename

    with open(file_path, "wb") as f:
        while chunk := upload_file.file.read(chunk_size):
            file_size += len(chunk)
            if file_size > max_file_size:
                f.close()
                os.remove(file_path)
                raise FileTooLargeError("File too large")
            f.write(chunk)

    return UploadedFile(
        original_filename=upload_file.filename or None, filepath=file_path
    )


def delete_file(file_path: Path):
    """Delete a file from filesystem"""
    if os.path.exists(file_path):
        os.remove(file_path)
