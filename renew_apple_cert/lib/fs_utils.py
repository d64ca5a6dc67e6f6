"""Filesystem helpers: directory provisioning and atomic artifact writes."""

import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from .errors import PersistenceError, ProvisioningError
from .logging_config import LOGGER

FILE_MODE = 0o700


def ensure_directories(paths: Iterable[Path | str], mode: int = FILE_MODE) -> None:
    """Create each directory and its missing parents with owner-only permissions.

    Directories that already exist are left untouched, including their mode.

    Args:
        paths: Directories to provision
        mode: Permission bits for every directory created

    Raises:
        ProvisioningError: If a path is empty, exists as a non-directory,
            or cannot be created
    """
    for raw in paths:
        if not str(raw):
            raise ProvisioningError("directory path is empty")
        path = Path(raw)
        try:
            _ensure_directory(path, mode)
        except OSError as err:
            raise ProvisioningError(f"cannot create directory {path}: {err}") from err


def _ensure_directory(path: Path, mode: int) -> None:
    if path.is_dir():
        return

    # Walk up to the first existing ancestor so every new segment gets `mode`
    missing = []
    current = path
    while not current.exists():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent

    if not current.is_dir():
        raise ProvisioningError(f"{current} exists and is not a directory")

    for directory in reversed(missing):
        try:
            directory.mkdir(mode=mode)
        except FileExistsError:
            if not directory.is_dir():
                raise ProvisioningError(f"{directory} exists and is not a directory") from None
            continue
        LOGGER.info("Created directory %s", directory)


def write_file_atomic(path: Path, data: bytes, mode: int = FILE_MODE) -> Path:
    """Write bytes to path via a temporary file renamed into place.

    Readers see either the previous content or the complete new content.
    The temporary file is removed on every failure path.

    Args:
        path: Destination file
        data: Full file content
        mode: Permission bits for the written file

    Returns:
        The destination path

    Raises:
        PersistenceError: If the write, chmod or rename fails
    """
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except OSError as err:
        raise PersistenceError(f"cannot create temporary file for {path}: {err}") from err

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except OSError as err:
        tmp_path.unlink(missing_ok=True)
        raise PersistenceError(f"failed to write {path}: {err}") from err

    return path


def remove_file(path: Path) -> None:
    """Delete path if it exists.

    Raises:
        PersistenceError: If the file exists but cannot be removed
    """
    try:
        path.unlink(missing_ok=True)
    except OSError as err:
        raise PersistenceError(f"cannot remove {path}: {err}") from err
