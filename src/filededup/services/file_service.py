"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File removal for callers of the scan engine. The engine itself never deletes anything.
"""
import logging
import os
from pathlib import Path
from typing import List, Tuple

from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """
    Removal of files chosen by the user from duplicate groups.
    Trash is the default; permanent deletion must be asked for explicitly.
    """

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise RuntimeError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

    @classmethod
    def delete(cls, file_path: str, permanent: bool = False) -> bool:
        """
        Passthrough removal returning success/failure instead of raising.
        """
        try:
            if permanent:
                os.remove(file_path)
            else:
                cls.move_to_trash(file_path)
        except (OSError, RuntimeError) as e:
            logger.warning(f"Failed to delete {file_path}: {e}")
            return False

        logger.debug(f"Deleted {'permanently' if permanent else 'to trash'}: {file_path}")
        return True

    @classmethod
    def delete_multiple(cls, file_paths: List[str], permanent: bool = False) -> Tuple[List[str], List[str]]:
        """Deletes every path independently. Returns (deleted, failed)."""
        deleted, failed = [], []
        for path in file_paths:
            if cls.delete(path, permanent=permanent):
                deleted.append(path)
            else:
                failed.append(path)
        return deleted, failed
