import re

from rangeserve.storage import Range

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _leading_int(text: str) -> int | None:
    match = _LEADING_INT.match(text)
    if match is None:
        return None
    return int(match.group(1))


def parse_range(header: str, size: int) -> Range:
    """Turn a `Range: bytes=<start>-<end>` value into a range inside an object of `size` bytes.

    Malformed or out of bounds values are clamped rather than rejected:
    an unreadable start becomes 0, an absent or unreadable end becomes the
    last byte, and an end before the start also becomes the last byte.
    `size` must be positive.
    """
    if size <= 0:
        raise ValueError(f"cannot take a range of an object of size {size}")
    last = size - 1
    fields = header.replace("bytes=", "", 1).split("-")
    start = _leading_int(fields[0])
    end = _leading_int(fields[1]) if len(fields) > 1 and fields[1] else None
    if start is None:
        start = 0
    if end is None:
        end = last
    start = max(0, min(start, last))
    end = min(end, last)
    if end < start:
        end = last
    return Range(start=start, end=end)


def content_range(start: int, length: int, size: int) -> str:
    return f"bytes {start}-{start + length - 1}/{size}"
