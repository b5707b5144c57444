import os
from datetime import datetime
from typing import Any, Dict, Optional

from utils.data.json_manager import JSONManager


class OutputManager:
    _output_dir = "output"

    @staticmethod
    def get_output_path(sub_dir: str, file_name: str, extension: str = "json") -> str:
        """
        Constructs a timestamped file path within the output directory,
        ensuring the subdirectory exists.

        Args:
            sub_dir (str): The subdirectory within the main output folder (e.g., 'semconv-summary').
            file_name (str): The base name of the file, without timestamp or extension.
            extension (str): The file extension (default: 'json').

        Returns:
            str: The full path to the output file.
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        full_file_name = f"{file_name}_{timestamp}.{extension}"

        target_dir = os.path.join(OutputManager._output_dir, sub_dir)
        os.makedirs(target_dir, exist_ok=True)

        return os.path.join(target_dir, full_file_name)

    @staticmethod
    def save_summary_report(
        summary: Dict[str, Any],
        sub_dir: str,
        file_basename: str,
        output_path: Optional[str] = None,
    ) -> str:
        """
        Persists a summary dictionary as JSON. Without ``output_path`` the file
        goes to a timestamped name under the output root.

        Returns:
            str: The path where the file was saved.
        """
        if output_path:
            path = output_path
        else:
            path = OutputManager.get_output_path(sub_dir, file_basename, "json")

        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        JSONManager.write_json(summary, path)
        return path
