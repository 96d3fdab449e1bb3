from dataclasses import dataclass, field

from rangeserve.storage import NotFound, ObjectStat, StorageBackend


@dataclass
class InMemoryBackend(StorageBackend):
    storage: dict[str, bytes] = field(default_factory=dict)

    def put(self, key: str, body: bytes) -> None:
        self.storage[key] = body

    async def stat(self, key: str) -> ObjectStat | NotFound:
        if key in self.storage:
            return ObjectStat(size=len(self.storage[key]), is_file=True)
        # a key that only prefixes other keys behaves like a directory
        if any(k.startswith(f"{key}/") for k in self.storage):
            return ObjectStat(size=0, is_file=False)
        return NotFound(key=key, reason="no such object")

    async def read(self, key: str) -> bytes | NotFound:
        if key not in self.storage:
            return NotFound(key=key, reason="no such object")
        return self.storage[key]

    async def read_range(self, key: str, start: int, length: int) -> bytes | NotFound:
        if key not in self.storage:
            return NotFound(key=key, reason="no such object")
        return self.storage[key][start : start + length]
