"""
JSON file storage for the TVL output artifact.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

from .base import DataError, StorageBase

logger = logging.getLogger(__name__)


class JsonStorage(StorageBase):
    """
    JSON file storage with atomic overwrite.

    The file is written to a temporary sibling and renamed into place, so a
    failed run never leaves a partial artifact behind.
    """

    def __init__(self, base_path: Union[str, Path] = "./data", pretty: bool = True):
        """
        Initialize JSON storage.

        Args:
            base_path: Directory files are written to
            pretty: Whether to pretty-print JSON
        """
        self.base_path = Path(base_path)
        self.pretty = pretty

    def _get_full_path(self, filename: str) -> Path:
        if not filename.endswith('.json'):
            filename = f"{filename}.json"
        return self.base_path / filename

    def save(self, filename: str, data: Any) -> bool:
        """
        Save data to a JSON file.

        Args:
            filename: File name (relative to base_path)
            data: Data to save

        Returns:
            bool: True if successful
        """
        filepath = self._get_full_path(filename)
        temp_path = filepath.with_suffix('.tmp')
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)

            with open(temp_path, 'w', encoding='utf-8') as f:
                if self.pretty:
                    json.dump(data, f, indent=2)
                else:
                    json.dump(data, f)

            os.replace(temp_path, filepath)

            logger.info(f"Saved data to {filepath}")
            return True

        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save JSON file {filename}: {e}")
            if temp_path.exists():
                temp_path.unlink()
            raise DataError(f"JSON save failed: {e}") from e

    def load(self, filename: str) -> Optional[Any]:
        """
        Load data from a JSON file.

        Returns:
            Loaded data or None if file doesn't exist
        """
        filepath = self._get_full_path(filename)
        if not filepath.exists():
            return None
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load JSON file {filename}: {e}")
            raise DataError(f"JSON load failed: {e}") from e
