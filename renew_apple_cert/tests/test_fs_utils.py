"""Tests for fs_utils module."""

import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from renew_apple_cert.lib.errors import PersistenceError, ProvisioningError
from renew_apple_cert.lib.fs_utils import ensure_directories, write_file_atomic


def _mode(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


class TestEnsureDirectories:
    """Tests for ensure_directories (directory provisioning)."""

    def test_creates_nested_directories(self, temp_output_dir: Path) -> None:
        """Missing intermediate segments are created."""
        target = temp_output_dir / "a" / "b" / "c"

        ensure_directories([target])

        assert target.is_dir()

    def test_new_directories_are_owner_only(self, temp_output_dir: Path) -> None:
        """Every created segment grants no group or other access."""
        target = temp_output_dir / "outer" / "inner"

        ensure_directories([target])

        assert _mode(temp_output_dir / "outer") & 0o077 == 0
        assert _mode(target) & 0o077 == 0

    def test_creates_every_path(self, temp_output_dir: Path) -> None:
        """All listed directories are provisioned."""
        csr_dir = temp_output_dir / "csr"
        downloaded_dir = temp_output_dir / "downloaded"

        ensure_directories([csr_dir, downloaded_dir])

        assert csr_dir.is_dir()
        assert downloaded_dir.is_dir()

    def test_existing_directory_is_noop(self, temp_output_dir: Path) -> None:
        """Pre-existing directory is not an error and keeps its mode."""
        existing = temp_output_dir / "existing"
        existing.mkdir()
        existing.chmod(0o755)
        (existing / "keep.txt").write_text("keep")

        ensure_directories([existing])
        ensure_directories([existing])

        assert _mode(existing) == 0o755
        assert (existing / "keep.txt").read_text() == "keep"

    def test_regular_file_raises_provisioning_error(self, temp_output_dir: Path) -> None:
        """Target path that is a regular file is rejected."""
        blocker = temp_output_dir / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(ProvisioningError, match="not a directory"):
            ensure_directories([blocker])

    def test_file_as_parent_raises_provisioning_error(self, temp_output_dir: Path) -> None:
        """A regular file in the middle of the path is rejected."""
        blocker = temp_output_dir / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(ProvisioningError, match="not a directory"):
            ensure_directories([blocker / "child"])

    def test_empty_path_raises_provisioning_error(self) -> None:
        """Empty path string is rejected."""
        with pytest.raises(ProvisioningError, match="empty"):
            ensure_directories([""])

    def test_mkdir_failure_raises_provisioning_error(self, temp_output_dir: Path) -> None:
        """OS errors during creation surface as ProvisioningError."""
        with patch.object(Path, "mkdir", side_effect=OSError(30, "Read-only file system")):
            with pytest.raises(ProvisioningError, match="Read-only file system"):
                ensure_directories([temp_output_dir / "readonly"])


class TestWriteFileAtomic:
    """Tests for write_file_atomic."""

    def test_writes_content(self, temp_output_dir: Path) -> None:
        """Written file holds the exact bytes."""
        path = temp_output_dir / "app.key"

        write_file_atomic(path, b"payload")

        assert path.read_bytes() == b"payload"

    def test_sets_owner_only_mode(self, temp_output_dir: Path) -> None:
        """File mode defaults to 0700."""
        path = temp_output_dir / "app.key"

        write_file_atomic(path, b"payload")

        assert _mode(path) == 0o700

    def test_replaces_existing_file(self, temp_output_dir: Path) -> None:
        """Second write fully replaces the first."""
        path = temp_output_dir / "app.csr"
        path.write_bytes(b"old content that is longer than the new one")

        write_file_atomic(path, b"new")

        assert path.read_bytes() == b"new"

    def test_leaves_no_temporary_files(self, temp_output_dir: Path) -> None:
        """Only the destination remains in the directory."""
        write_file_atomic(temp_output_dir / "app.key", b"payload")

        assert [p.name for p in temp_output_dir.iterdir()] == ["app.key"]

    def test_failed_rename_keeps_previous_content(self, temp_output_dir: Path) -> None:
        """Failure raises PersistenceError, removes the temp file and keeps the old file."""
        path = temp_output_dir / "app.key"
        path.write_bytes(b"previous")

        with patch("renew_apple_cert.lib.fs_utils.os.replace", side_effect=OSError(28, "No space left")):
            with pytest.raises(PersistenceError, match="No space left"):
                write_file_atomic(path, b"replacement")

        assert path.read_bytes() == b"previous"
        assert [p.name for p in temp_output_dir.iterdir()] == ["app.key"]

    def test_missing_directory_raises_persistence_error(self, temp_output_dir: Path) -> None:
        """Writing into a directory that does not exist fails."""
        with pytest.raises(PersistenceError):
            write_file_atomic(temp_output_dir / "missing" / "app.key", b"payload")
