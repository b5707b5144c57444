"""Writes rendered catalogs to disk, or compares them with what is already there."""

import difflib
import os
import posixpath
from dataclasses import dataclass

from domains.semconv.constant_emitter import NAMESPACE_PACKAGE_SUFFIX, RenderedFile
from utils.file_manager import FileManager
from utils.logging.logging_manager import LogManager


@dataclass(frozen=True)
class FileDrift:
    """Difference between a rendered file and its copy on disk.

    ``stale`` marks a generated file the current registry no longer produces.
    """

    path: str
    missing: bool
    diff: str
    stale: bool = False


class CatalogWriter:
    def __init__(self, output_dir: str):
        self.output_dir = output_dir
        self.logger = LogManager.get_instance().get_logger("CatalogWriter")

    def target_path(self, rendered: RenderedFile) -> str:
        return os.path.join(self.output_dir, *rendered.path.split("/"))

    def stale_files(self, files: list[RenderedFile]) -> list[str]:
        """Generated files in the output folder that ``files`` does not contain.

        Only the generated layout is considered: ``<filename>`` at the root and
        ``<namespace>conv/<filename>``, for the file names being rendered.
        """
        if not FileManager.is_folder(self.output_dir):
            return []

        rendered = {os.path.normpath(self.target_path(f)) for f in files}
        filenames = sorted({posixpath.basename(f.path) for f in files})
        package_dirs = [
            os.path.join(self.output_dir, name)
            for name in sorted(os.listdir(self.output_dir))
            if name.endswith(NAMESPACE_PACKAGE_SUFFIX) and os.path.isdir(os.path.join(self.output_dir, name))
        ]

        stale = []
        for filename in filenames:
            for folder in [self.output_dir, *package_dirs]:
                path = os.path.join(folder, filename)
                if FileManager.file_exists(path) and os.path.normpath(path) not in rendered:
                    stale.append(path)
        return sorted(stale)

    def write(self, files: list[RenderedFile]) -> list[str]:
        """Moves every rendered file into place, then removes stale generated files.

        Files are fully rendered before this is called, so a failed run never
        gets here and leaves nothing behind. Each file is replaced atomically.

        Returns:
            list[str]: Paths written, in the order given.
        """
        stale = self.stale_files(files)

        written = []
        for rendered in files:
            path = self.target_path(rendered)
            FileManager.atomic_write_file(path, rendered.content)
            self.logger.info(f"Wrote {path}")
            written.append(path)

        for path in stale:
            FileManager.delete_file(path)
            self.logger.info(f"Removed stale {path}")
            folder = os.path.dirname(path)
            if os.path.normpath(folder) != os.path.normpath(self.output_dir) and not os.listdir(folder):
                os.rmdir(folder)
        return written

    def check(self, files: list[RenderedFile]) -> list[FileDrift]:
        """Returns one ``FileDrift`` per file that is missing, differs from the rendered text or is stale."""
        drifts = []
        for rendered in files:
            path = self.target_path(rendered)
            missing = not FileManager.file_exists(path)
            current = "" if missing else FileManager.read_text(path)

            if not missing and current == rendered.content:
                self.logger.debug(f"{path} is up to date")
                continue

            diff = "".join(
                difflib.unified_diff(
                    current.splitlines(keepends=True),
                    rendered.content.splitlines(keepends=True),
                    fromfile=f"a/{rendered.path}",
                    tofile=f"b/{rendered.path}",
                )
            )
            drifts.append(FileDrift(path=path, missing=missing, diff=diff))

        for path in self.stale_files(files):
            relative = os.path.relpath(path, self.output_dir).replace(os.sep, "/")
            diff = "".join(
                difflib.unified_diff(
                    FileManager.read_text(path).splitlines(keepends=True),
                    [],
                    fromfile=f"a/{relative}",
                    tofile="/dev/null",
                )
            )
            drifts.append(FileDrift(path=path, missing=False, diff=diff, stale=True))
        return drifts
