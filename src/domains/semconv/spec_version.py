"""
Specification version resolution.

When the registry lives inside a git checkout of the upstream semantic
convention repository, a tagged release can be generated without touching
the working tree: the tag is checked out into a temporary ``git worktree``,
the registry is read from the same relative path inside it, and the worktree
is removed again.
"""

import os
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from typing import Iterator, Optional

from packaging.version import InvalidVersion, Version

from domains.semconv.error import SpecVersionError
from utils.logging.logging_manager import LogManager


class SpecRepository:
    """Git repository holding a semantic convention registry."""

    def __init__(self, root: str, git: str = "git"):
        self.root = root
        self.git = git
        self.logger = LogManager.get_instance().get_logger("SpecRepository")

    @classmethod
    def discover(cls, path: str, git: str = "git") -> Optional["SpecRepository"]:
        """Returns the repository containing ``path``, or None when it is not under git."""
        directory = path if os.path.isdir(path) else os.path.dirname(os.path.abspath(path))
        if shutil.which(git) is None:
            return None
        try:
            result = subprocess.run(
                [git, "-C", directory, "rev-parse", "--show-toplevel"],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError:
            return None
        if result.returncode != 0:
            return None
        return cls(result.stdout.strip(), git=git)

    def _run(self, *args: str) -> str:
        command = [self.git, "-C", self.root, *args]
        self.logger.debug(f"Running {' '.join(command)}")
        try:
            result = subprocess.run(command, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            raise SpecVersionError(
                f"git {args[0]} failed: {e.stderr.strip() or e.returncode}", repository=self.root
            ) from e
        except OSError as e:
            raise SpecVersionError(f"Unable to run git: {e}", repository=self.root) from e
        return result.stdout

    def tags(self) -> list[str]:
        return [line.strip() for line in self._run("tag", "--list").splitlines() if line.strip()]

    def latest_version(self) -> str:
        """Highest semantic-version tag; ``v``-prefixed tags are accepted, pre-releases skipped.

        Raises:
            SpecVersionError: If the repository has no release tag.
        """
        releases = []
        for tag in self.tags():
            try:
                version = Version(tag)
            except InvalidVersion:
                continue
            if not version.is_prerelease:
                releases.append((version, tag))

        if not releases:
            raise SpecVersionError("No release tags found", repository=self.root)
        version, tag = max(releases)
        self.logger.info(f"Latest specification version is {tag}")
        return tag

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags()

    @contextmanager
    def checkout(self, tag: str) -> Iterator[str]:
        """Checks ``tag`` out into a temporary worktree and yields its root.

        The worktree is removed on exit; a failed removal is logged and
        leaves the generation result untouched.
        """
        if not self.has_tag(tag):
            raise SpecVersionError(f"Tag '{tag}' does not exist", repository=self.root, version=tag)

        parent = tempfile.mkdtemp(prefix="semconv-worktree-")
        worktree = os.path.join(parent, tag)
        try:
            self._run("worktree", "add", "--detach", worktree, tag)
            self.logger.info(f"Checked out {tag} into {worktree}")
            try:
                yield worktree
            finally:
                try:
                    self._run("worktree", "remove", "-f", worktree)
                except SpecVersionError as e:
                    self.logger.warning(f"Failed to remove worktree {worktree}: {e}")
        finally:
            shutil.rmtree(parent, ignore_errors=True)


@contextmanager
def resolve_registry(input_path: str, spec_version: Optional[str] = None, latest: bool = False):
    """Yields ``(registry_path, spec_version)`` for a generation run.

    Without a version request the input is used as is. With ``latest`` or a
    version on an input inside a git repository the input path is mapped
    into a worktree of that tag. A version on any other input only labels
    the output.

    Raises:
        SpecVersionError: If ``latest`` is used outside a git repository, or git fails.
    """
    logger = LogManager.get_instance().get_logger("SpecRepository")

    if not spec_version and not latest:
        yield input_path, None
        return

    repository = SpecRepository.discover(input_path) if os.path.exists(input_path) else None
    if repository is None:
        if latest:
            raise SpecVersionError("--latest requires the registry to be inside a git repository")
        logger.info(f"{input_path} is not a local git checkout; using '{spec_version}' as a label only")
        yield input_path, spec_version
        return

    tag = repository.latest_version() if latest else spec_version
    relative = os.path.relpath(os.path.realpath(input_path), os.path.realpath(repository.root))
    with repository.checkout(tag) as worktree:
        yield os.path.normpath(os.path.join(worktree, relative)), tag
