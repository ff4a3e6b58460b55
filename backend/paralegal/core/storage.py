import logging
import os
import re
from pathlib import Path
from typing import Optional

# Configure logging
logger = logging.getLogger("storage")


class JsonFileStore:
    """
    Minimal key-value store: one JSON document per key, kept as a file in a directory.
    Values are opaque strings to the store.
    """

    def __init__(self, directory: str):
        """
        Initialize the store.

        Args:
            directory: Directory holding one ``<key>.json`` file per key
        """
        self.directory = Path(directory)
        os.makedirs(self.directory, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        if not re.fullmatch(r"[A-Za-z0-9_.-]+", key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        # Write then rename so a crash never leaves a half-written blob behind
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp_path, path)

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if path.exists():
            path.unlink()
            return True
        return False
