import os
import tempfile
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse

import requests


class FileManager:
    """
    General file management operations: listing, reading, writing and
    downloading files.
    """

    @staticmethod
    def list_files(
        directory: str,
        extension: Optional[str | Iterable[str]] = None,
        recursive: bool = False,
    ) -> List[str]:
        """
        Lists files in a directory with an optional filter by extension.

        Args:
            directory (str): Path to the directory.
            extension (Optional[str | Iterable[str]]): Extension(s) to keep (e.g., ".json").
            recursive (bool): Whether to descend into sub-directories.

        Returns:
            List[str]: Matching file paths, sorted so callers see a stable order.

        Raises:
            FileNotFoundError: If the directory does not exist.
        """
        if not os.path.isdir(directory):
            raise FileNotFoundError(f"Directory not found: {directory}")

        if isinstance(extension, str):
            extensions = (extension,)
        elif extension is None:
            extensions = None
        else:
            extensions = tuple(extension)

        def _matches(file_name: str) -> bool:
            return extensions is None or file_name.lower().endswith(extensions)

        if not recursive:
            return sorted(
                os.path.join(directory, f)
                for f in os.listdir(directory)
                if os.path.isfile(os.path.join(directory, f)) and _matches(f)
            )

        found = []
        for root, dirs, files in os.walk(directory):
            dirs[:] = [d for d in dirs if not d.startswith(".")]
            found.extend(os.path.join(root, f) for f in files if _matches(f))
        return sorted(found)

    @staticmethod
    def read_text(file_path: str) -> str:
        """
        Reads the whole content of a UTF-8 text file. Line endings are kept
        as stored, so the result can be compared byte for byte.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        if not os.path.isfile(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")
        with open(file_path, "r", encoding="utf-8", newline="") as file:
            return file.read()

    @staticmethod
    def atomic_write_file(file_path: str, content: str) -> None:
        """
        Writes content to a temporary sibling of ``file_path`` and moves it into
        place, so readers never observe a half-written file.

        Args:
            file_path (str): Destination path.
            content (str): The content to write.
        """
        directory = os.path.dirname(os.path.abspath(file_path))
        FileManager.create_folder(directory)
        fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as file:
                file.write(content)
            os.replace(tmp_path, file_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    @staticmethod
    def delete_file(file_path: str) -> None:
        """
        Deletes a file.

        Args:
            file_path (str): Path to the file to be deleted.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        if os.path.exists(file_path):
            os.remove(file_path)
        else:
            raise FileNotFoundError(f"File not found: {file_path}")

    @staticmethod
    def create_folder(folder_path: str, exist_ok: bool = True) -> None:
        """
        Creates a folder and its parents.

        Raises:
            OSError: If the folder cannot be created.
        """
        os.makedirs(folder_path, exist_ok=exist_ok)

    @staticmethod
    def is_folder(path: str) -> bool:
        return os.path.isdir(path)

    @staticmethod
    def file_exists(file_path: str) -> bool:
        return os.path.isfile(file_path)

    @staticmethod
    def is_url(location: str) -> bool:
        """Tells whether ``location`` is an http(s) URL rather than a local path."""
        return urlparse(location).scheme in ("http", "https")

    @staticmethod
    def download_file(
        url: str,
        destination_path: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: int = 30,
        chunk_size: int = 8192,
    ) -> str:
        """
        Downloads a file from a URL and saves it to the specified destination.

        Args:
            url (str): The URL to download the file from.
            destination_path (str): File path, or a directory to save into using
                the URL's base name.
            headers (Optional[Dict[str, str]]): Optional request headers.
            timeout (int): Request timeout in seconds (default: 30).
            chunk_size (int): Download chunk size in bytes (default: 8192).

        Returns:
            str: The path where the file was saved.

        Raises:
            requests.exceptions.RequestException: If the download fails.
            OSError: If the file cannot be saved.
            ValueError: If the URL is invalid.
        """
        if not url or not FileManager.is_url(url):
            raise ValueError(f"Invalid URL: {url}")

        if os.path.isdir(destination_path):
            filename = os.path.basename(urlparse(url).path) or "download"
            destination_path = os.path.join(destination_path, filename)
        else:
            FileManager.create_folder(os.path.dirname(destination_path) or ".")

        try:
            response = requests.get(url, headers=headers or {}, timeout=timeout, stream=True)
            response.raise_for_status()

            with open(destination_path, "wb") as file:
                for chunk in response.iter_content(chunk_size=chunk_size):
                    if chunk:  # keep-alive chunks are empty
                        file.write(chunk)

            return destination_path

        except requests.exceptions.RequestException as e:
            raise requests.exceptions.RequestException(f"Failed to download file from {url}: {e}") from e
        except OSError as e:
            raise OSError(f"Failed to save file to {destination_path}: {e}") from e
