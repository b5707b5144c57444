import os
import shutil
import subprocess
import tempfile
from unittest.mock import patch

import pytest

from domains.semconv.error import SpecVersionError
from domains.semconv.spec_version import SpecRepository, resolve_registry


def _completed(stdout="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")


class FakeGit:
    """Stands in for ``subprocess.run`` and records the git calls made."""

    def __init__(self, root, tags, fail_remove=False, fail_add=False):
        self.root = str(root)
        self.tags = tags
        self.fail_remove = fail_remove
        self.fail_add = fail_add
        self.calls = []

    def __call__(self, command, **kwargs):
        args = command[3:]
        self.calls.append(args)
        if args[:2] == ["rev-parse", "--show-toplevel"]:
            return _completed(self.root + "\n")
        if args[0] == "tag":
            return _completed("\n".join(self.tags) + "\n")
        if args[:2] == ["worktree", "add"]:
            if self.fail_add:
                raise subprocess.CalledProcessError(128, command, stderr="invalid reference")
            return _completed()
        if args[:2] == ["worktree", "remove"]:
            if self.fail_remove:
                raise subprocess.CalledProcessError(1, command, stderr="locked")
            return _completed()
        raise AssertionError(f"unexpected git call {args}")


def test_latest_version_picks_highest_release(tmp_path):
    fake = FakeGit(tmp_path, ["v1.9.0", "v1.10.0", "v1.11.0-rc.1", "not-a-version", "v1.2.3"])
    with patch("domains.semconv.spec_version.subprocess.run", side_effect=fake):
        assert SpecRepository(str(tmp_path)).latest_version() == "v1.10.0"


def test_latest_version_without_tags(tmp_path):
    with patch("domains.semconv.spec_version.subprocess.run", side_effect=FakeGit(tmp_path, [])):
        with pytest.raises(SpecVersionError):
            SpecRepository(str(tmp_path)).latest_version()


def test_checkout_adds_and_removes_worktree(tmp_path):
    fake = FakeGit(tmp_path, ["v1.28.0"])
    with patch("domains.semconv.spec_version.subprocess.run", side_effect=fake):
        with SpecRepository(str(tmp_path)).checkout("v1.28.0") as worktree:
            assert worktree.endswith("v1.28.0")

    assert ["worktree", "add", "--detach", worktree, "v1.28.0"] in fake.calls
    assert ["worktree", "remove", "-f", worktree] in fake.calls


def test_checkout_unknown_tag(tmp_path):
    with patch("domains.semconv.spec_version.subprocess.run", side_effect=FakeGit(tmp_path, ["v1.28.0"])):
        with pytest.raises(SpecVersionError):
            with SpecRepository(str(tmp_path)).checkout("v9.9.9"):
                pass


def test_failed_worktree_removal_is_not_raised(tmp_path):
    fake = FakeGit(tmp_path, ["v1.28.0"], fail_remove=True)
    with patch("domains.semconv.spec_version.subprocess.run", side_effect=fake):
        with SpecRepository(str(tmp_path)).checkout("v1.28.0") as worktree:
            result = worktree
    assert result.endswith("v1.28.0")


def test_resolve_maps_input_into_worktree(tmp_path):
    model = tmp_path / "repo" / "model"
    model.mkdir(parents=True)
    fake = FakeGit(tmp_path / "repo", ["v1.27.0", "v1.28.0"])
    with patch("domains.semconv.spec_version.shutil.which", return_value="/usr/bin/git"), patch(
        "domains.semconv.spec_version.subprocess.run", side_effect=fake
    ):
        with resolve_registry(str(model), latest=True) as (path, version):
            assert version == "v1.28.0"
            assert path.replace("\\", "/").endswith("v1.28.0/model")


def test_resolve_without_version_uses_input_as_is(tmp_path):
    with resolve_registry(str(tmp_path)) as (path, version):
        assert path == str(tmp_path)
        assert version is None


def test_version_is_a_label_outside_git(tmp_path):
    with patch("domains.semconv.spec_version.SpecRepository.discover", return_value=None):
        with resolve_registry(str(tmp_path), spec_version="v1.28.0") as (path, version):
            assert path == str(tmp_path)
            assert version == "v1.28.0"


def test_latest_requires_git(tmp_path):
    with patch("domains.semconv.spec_version.SpecRepository.discover", return_value=None):
        with pytest.raises(SpecVersionError):
            with resolve_registry(str(tmp_path), latest=True):
                pass


def test_discover_outside_repository(tmp_path):
    with patch("domains.semconv.spec_version.shutil.which", return_value="/usr/bin/git"), patch(
        "domains.semconv.spec_version.subprocess.run", return_value=_completed(returncode=128)
    ):
        assert SpecRepository.discover(str(tmp_path)) is None


def test_failed_worktree_add_removes_temporary_folder(tmp_path, monkeypatch):
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    fake = FakeGit(tmp_path, ["v1.28.0"], fail_add=True)
    with patch("domains.semconv.spec_version.subprocess.run", side_effect=fake):
        with pytest.raises(SpecVersionError):
            with SpecRepository(str(tmp_path)).checkout("v1.28.0"):
                pass
    assert list(scratch.iterdir()) == []
    assert not any(call[:2] == ["worktree", "remove"] for call in fake.calls)


def _git(repo, *args):
    subprocess.run(
        ["git", "-C", str(repo), "-c", "user.name=semconv", "-c", "user.email=semconv@example.com",
         "-c", "commit.gpgsign=false", *args],
        check=True,
        capture_output=True,
        text=True,
    )


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
def test_latest_checks_out_highest_release_of_a_real_repository(tmp_path, monkeypatch):
    repo = tmp_path / "semantic-conventions"
    registry = repo / "model" / "metrics.yaml"
    registry.parent.mkdir(parents=True)
    _git(repo, "init", "-q")
    for tag in ("v1.9.0", "v1.10.0", "v1.11.0-rc.1"):
        registry.write_text(
            f"metrics:\n  - {{id: http.server.request.duration, instrument: histogram, unit: s, description: '{tag}'}}\n",
            encoding="utf-8",
        )
        _git(repo, "add", "-A")
        _git(repo, "commit", "-q", "-m", f"release {tag}")
        _git(repo, "tag", tag)

    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))

    with resolve_registry(str(registry), latest=True) as (path, version):
        assert version == "v1.10.0"
        assert os.path.realpath(path).startswith(os.path.realpath(str(scratch)))
        with open(path, encoding="utf-8") as f:
            assert "description: 'v1.10.0'" in f.read()

    assert list(scratch.iterdir()) == []
    worktrees = subprocess.run(
        ["git", "-C", str(repo), "worktree", "list", "--porcelain"], check=True, capture_output=True, text=True
    ).stdout
    assert worktrees.count("worktree ") == 1
    # the working tree itself still holds the newest commit
    assert "v1.11.0-rc.1" in registry.read_text(encoding="utf-8")
