"""Temp-file-then-rename commits for cache files."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from search_gwas.errors import FilesystemError


class PendingFile:
    """Temporary sibling of ``target`` that only becomes visible on :meth:`commit`."""

    def __init__(self, path: Path, target: Path) -> None:
        self.path = path
        self.target = target
        self.committed = False

    def commit(self) -> None:
        try:
            os.replace(self.path, self.target)
        except OSError as exc:
            raise FilesystemError(
                f"Could not move {self.path} into place at {self.target}: {exc}"
            ) from exc
        self.committed = True


@contextmanager
def atomic_write(path: str | Path) -> Iterator[PendingFile]:
    """Yield a uniquely named temporary file for ``path``.

    The temporary file lives in the target's directory so the commit is a
    same-filesystem rename. Unless :meth:`PendingFile.commit` ran, the file is
    removed on every exit path; failing to remove it raises
    :class:`FilesystemError`, even while another exception is propagating.
    """

    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handle, temp_name = tempfile.mkstemp(
            prefix=f".{target.name}.",
            suffix=".tmp",
            dir=target.parent,
        )
        os.close(handle)
    except OSError as exc:
        raise FilesystemError(f"Could not create temporary file for {target}: {exc}") from exc

    pending = PendingFile(Path(temp_name), target)
    try:
        yield pending
    finally:
        if not pending.committed:
            _discard(pending.path)


def _discard(temp: Path) -> None:
    try:
        temp.unlink()
    except FileNotFoundError:
        return
    except OSError as exc:
        raise FilesystemError(f"Could not remove temporary file {temp}: {exc}") from exc


def write_bytes_atomic(path: str | Path, data: bytes) -> None:
    """Commit ``data`` to ``path`` atomically."""

    with atomic_write(path) as pending:
        try:
            pending.path.write_bytes(data)
        except OSError as exc:
            raise FilesystemError(f"Could not write {pending.path}: {exc}") from exc
        pending.commit()


def write_text_atomic(path: str | Path, text: str) -> None:
    """Commit UTF-8 ``text`` to ``path`` atomically."""

    write_bytes_atomic(path, text.encode("utf-8"))
