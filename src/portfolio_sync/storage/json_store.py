"""JSON snapshot storage — one file, atomic replace on write."""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any

import structlog

log = structlog.get_logger("storage")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite number {name} in snapshot")


class StorageWriteError(Exception):
    """Persisting a snapshot failed; the previous file is left untouched."""


class JsonStorageService:
    """Durable last-known-good snapshot kept as pretty-printed JSON.

    Writes go to a temporary file in the target directory and are committed
    with ``os.replace``, so readers see either the old or the new file.
    Reads never raise: missing or unparsable content is reported as ``None``.
    """

    def __init__(self, path: str | Path) -> None:
        p = Path(path)
        if not p.is_absolute():
            p = Path.cwd() / p
        self._path = p
        # mkstemp creates 0600 files; committed snapshots get the umask default.
        umask = os.umask(0)
        os.umask(umask)
        self._file_mode = 0o666 & ~umask

    @property
    def path(self) -> Path:
        return self._path

    async def save(self, snapshot: Any) -> None:
        """Serialize *snapshot* and atomically replace the stored file.

        Raises:
            StorageWriteError: on serialization or filesystem failure.
        """
        try:
            await asyncio.to_thread(self._write, snapshot)
        except (OSError, TypeError, ValueError) as exc:
            log.error("snapshot_save_failed", path=str(self._path), error=str(exc))
            raise StorageWriteError(f"Failed to write {self._path}: {exc}") from exc
        log.info("snapshot_saved", path=str(self._path))

    async def read(self) -> Any | None:
        """Return the last committed snapshot, or ``None`` if absent."""
        return await asyncio.to_thread(self._read)

    def _write(self, snapshot: Any) -> None:
        payload = json.dumps(snapshot, indent=2, ensure_ascii=False, allow_nan=False)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                os.chmod(tmp_name, self._file_mode)
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def _read(self) -> Any | None:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("snapshot_read_failed", path=str(self._path), error=str(exc))
            return None
        try:
            return json.loads(text, parse_constant=_reject_constant)
        except ValueError as exc:
            log.warning("snapshot_read_failed", path=str(self._path), error=str(exc))
            return None
