from dataclasses import dataclass
from typing import Protocol, Sequence


@dataclass(frozen=True)
class Range:
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class ObjectStat:
    size: int
    is_file: bool


@dataclass(frozen=True)
class NotFound:
    """Why an object can't be served. Returned by storage steps instead of raising."""

    key: str
    reason: str
    error: BaseException | None = None


class StorageBackend(Protocol):
    async def stat(self, key: str) -> ObjectStat | NotFound: ...

    async def read(self, key: str) -> bytes | NotFound: ...

    async def read_range(self, key: str, start: int, length: int) -> bytes | NotFound: ...


def join_segments(segments: Sequence[str]) -> str | NotFound:
    """Join route segments into a relative key.

    Empty and "." segments are dropped. Parent references, backslashes and NUL
    bytes are refused outright so a key can never climb out of its namespace.
    """
    parts: list[str] = []
    for segment in segments:
        for part in segment.split("/"):
            if part in ("", "."):
                continue
            if part == ".." or "\\" in part or "\x00" in part:
                return NotFound(key="/".join(segments), reason="unsafe path segment")
            parts.append(part)
    if not parts:
        return NotFound(key="", reason="empty path")
    return "/".join(parts)
