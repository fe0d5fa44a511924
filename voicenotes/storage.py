"""Filesystem backed access to the notes vault."""

from __future__ import annotations

import os
import posixpath
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Iterator, Union

from .errors import StorageFailed
from .filters import FileKind
from .models import Candidate


class VaultStorage:
    """Read, write and move files addressed by vault-relative ``/`` paths."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root).expanduser().resolve()

    def resolve(self, path: str) -> Path:
        return self.root.joinpath(*PurePosixPath(path).parts)

    def relative(self, absolute: Union[str, Path]) -> str:
        """Return the vault-relative path for ``absolute``.

        Raises ``ValueError`` if it does not live under the vault root.
        """

        return Path(absolute).resolve().relative_to(self.root).as_posix()

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def kind(self, path: str) -> FileKind:
        return FileKind.FOLDER if self.resolve(path).is_dir() else FileKind.FILE

    def create_folder(self, path: str) -> None:
        try:
            self.resolve(path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageFailed(f"Could not create folder {path}: {exc}") from exc

    def read_bytes(self, path: str) -> bytes:
        try:
            return self.resolve(path).read_bytes()
        except OSError as exc:
            raise StorageFailed(f"Could not read {path}: {exc}") from exc

    def write_file(self, path: str, text: str) -> None:
        """Create ``path`` with ``text``; never overwrites an existing file."""

        target = self.resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("x", encoding="utf-8") as fh:
                fh.write(text)
        except FileExistsError as exc:
            raise StorageFailed(f"Refusing to overwrite existing file {path}") from exc
        except OSError as exc:
            raise StorageFailed(f"Could not write {path}: {exc}") from exc

    def move(self, source: str, destination: str) -> None:
        src = self.resolve(source)
        dest = self.resolve(destination)
        if dest.exists():
            raise StorageFailed(f"Refusing to move {source} over existing {destination}")
        try:
            src.rename(dest)
        except OSError as exc:
            raise StorageFailed(f"Could not move {source} to {destination}: {exc}") from exc

    def iter_files(self) -> Iterator[str]:
        """Yield every file in the vault, skipping hidden folders such as ``.obsidian``."""

        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for filename in sorted(filenames):
                yield Path(dirpath, filename).relative_to(self.root).as_posix()

    def candidate(self, path: str) -> Candidate:
        """Capture the metadata of ``path`` as an immutable :class:`Candidate`."""

        try:
            stat = self.resolve(path).stat()
        except OSError as exc:
            raise StorageFailed(f"Could not stat {path}: {exc}") from exc
        extension = posixpath.splitext(path)[1].lstrip(".")
        modified_at = datetime.fromtimestamp(stat.st_mtime).astimezone()
        return Candidate(path=path, extension=extension, modified_at=modified_at)
