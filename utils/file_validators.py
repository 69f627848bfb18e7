"""Validation of uploaded participant list files."""

import logging
from pathlib import Path
from typing import Optional

from werkzeug.datastructures import FileStorage

from core.constants import ImportDefaults
from core.exceptions import FileValidationError

logger = logging.getLogger(__name__)


def validate_file_size(file_size: Optional[int], max_size: int = ImportDefaults.MAX_FILE_SIZE) -> None:
    """
    Validate the upload size.

    Args:
        file_size: File size in bytes
        max_size: Upper limit in bytes

    Raises:
        FileValidationError: If the file is too large
    """
    if not file_size:
        return

    if file_size > max_size:
        max_mb = max(max_size // (1024 * 1024), 1)
        raise FileValidationError(f"檔案太大，上限為 {max_mb} MB")


def validate_extension(filename: Optional[str]) -> None:
    """Only ``.csv`` and ``.txt`` lists are accepted."""
    suffix = Path(filename or "").suffix.lower()
    if suffix not in ImportDefaults.ALLOWED_EXTENSIONS:
        logger.warning(f"Rejected upload with extension '{suffix}'")
        raise FileValidationError("請上傳 CSV 或 TXT 檔案")


def read_list_upload(upload: Optional[FileStorage], max_size: int = ImportDefaults.MAX_FILE_SIZE) -> bytes:
    """
    Validate an uploaded list file and return its raw bytes.

    Raises:
        FileValidationError: If no file was sent or it fails validation
    """
    if upload is None or not upload.filename:
        raise FileValidationError("請選擇要上傳的 CSV 檔案")

    validate_extension(upload.filename)
    data = upload.read()
    validate_file_size(len(data), max_size)
    return data
