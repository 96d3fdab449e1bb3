from pathlib import Path

import pytest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """A content root holding a few objects, with a file just outside of it."""
    root = tmp_path / "uploads"
    (root / "videos").mkdir(parents=True)
    (root / "videos" / "clip.mp4").write_bytes(bytes(range(100)))
    (root / "notes.txt").write_bytes(b"Hello, World!")
    (root / "empty.webm").write_bytes(b"")
    (tmp_path / "secret.txt").write_bytes(b"do not serve")
    return root
