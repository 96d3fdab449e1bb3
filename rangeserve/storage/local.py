from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

import anyio
from anyio import AsyncFile

from rangeserve.storage import NotFound, ObjectStat, StorageBackend

logger = logging.getLogger(__name__)


@dataclass
class LocalStorage(StorageBackend):
    """Objects are regular files below `root`."""

    root: Path

    def __post_init__(self) -> None:
        self.root = Path(self.root).resolve()

    async def resolve(self, key: str) -> Path | NotFound:
        # follows symlinks, so a link pointing outside the root is refused too
        try:
            target = Path(await anyio.Path(self.root, key).resolve())
        except (OSError, RuntimeError) as e:
            return NotFound(key=key, reason="cannot resolve", error=e)
        if target == self.root or not target.is_relative_to(self.root):
            return NotFound(key=key, reason=f"resolves outside of {self.root}")
        return target

    async def stat(self, key: str) -> ObjectStat | NotFound:
        path = await self.resolve(key)
        if isinstance(path, NotFound):
            return path
        try:
            st = await anyio.Path(path).stat()
        except OSError as e:
            return NotFound(key=key, reason="stat failed", error=e)
        return ObjectStat(size=st.st_size, is_file=stat.S_ISREG(st.st_mode))

    async def _swapped(self, key: str, f: AsyncFile[bytes]) -> NotFound | None:
        # the path may have been replaced between resolving and opening it
        again = await self.resolve(key)
        if isinstance(again, NotFound):
            return again
        if not os.path.samestat(os.fstat(f.wrapped.fileno()), await anyio.Path(again).stat()):
            return NotFound(key=key, reason="changed while opening")
        return None

    async def _read(self, key: str, start: int = 0, length: int = -1) -> bytes | NotFound:
        path = await self.resolve(key)
        if isinstance(path, NotFound):
            return path
        try:
            async with await anyio.open_file(path, "rb") as f:
                swapped = await self._swapped(key, f)
                if swapped is not None:
                    return swapped
                await f.seek(start)
                return await f.read(length)
        except OSError as e:
            return NotFound(key=key, reason="read failed", error=e)

    async def read(self, key: str) -> bytes | NotFound:
        return await self._read(key)

    async def read_range(self, key: str, start: int, length: int) -> bytes | NotFound:
        data = await self._read(key, start, length)
        if isinstance(data, bytes) and len(data) < length:
            logger.debug("short read of %s: wanted %d bytes at %d, got %d", key, length, start, len(data))
        return data
