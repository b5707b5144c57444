import json
import os
from typing import Any

from filelock import FileLock


class JSONManager:
    """
    JSON file operations: reading, and writing under a file lock.

    Example Usage:
        >>> JSONManager.read_json("example.json", default={})
        {}

        >>> JSONManager.write_json({"key": "value"}, "example.json")
        True
    """

    @staticmethod
    def read_json(file_path: str, default: Any = None) -> Any:
        """
        Reads and returns content from a JSON file. Returns a default value if
        the file does not exist.

        Args:
            file_path (str): Path to the JSON file.
            default (Any): Value to return if the file is not found.

        Returns:
            Any: Parsed content of the JSON file or the default value.

        Raises:
            FileNotFoundError: If the file is missing and no default is given.
            json.JSONDecodeError: If the file is not valid JSON.
        """
        if not os.path.exists(file_path):
            if default is not None:
                return default
            raise FileNotFoundError(f"JSON file not found: {file_path}")
        with open(file_path, "r", encoding="utf-8") as file:
            return json.load(file)

    @staticmethod
    def dumps(data: Any) -> str:
        """Serializes data the same way every time: sorted keys, two-space indent, trailing newline."""
        return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"

    @staticmethod
    def write_json(data: Any, file_path: str, backup: bool = True) -> bool:
        """
        Writes data to a JSON file while holding ``<file>.lock``. An existing
        file is kept as ``<file>.bak`` unless ``backup`` is False.

        Returns:
            bool: True if the operation is successful.
        """
        lock = FileLock(f"{file_path}.lock")
        with lock:
            if backup and os.path.exists(file_path):
                os.replace(file_path, f"{file_path}.bak")
            with open(file_path, "w", encoding="utf-8") as file:
                file.write(JSONManager.dumps(data))
        return True
