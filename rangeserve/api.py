import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import APIRouter, Header, Path, Response

from rangeserve.content_types import content_type_for, is_seekable
from rangeserve.depends import Injected
from rangeserve.ranges import content_range, parse_range
from rangeserve.storage import NotFound, ObjectStat, StorageBackend, join_segments

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass
class Config:
    cache_max_age: int = 86400

    @property
    def cache_control(self) -> str:
        return f"public, max-age={self.cache_max_age}"


@router.get("/health")
async def health() -> Response:
    return Response(status_code=200)


def not_found(result: NotFound) -> Response:
    # the cause stays in the server log, the client only learns it's missing
    logger.warning("Not found: %r (%s)", result.key, result.reason, exc_info=result.error)
    return Response(status_code=404, content="Not found", media_type="text/plain")


@dataclass
class StoredObject:
    key: str
    stat: ObjectStat
    content_type: str


async def find_object(path: str, fs: StorageBackend) -> StoredObject | NotFound:
    key = join_segments(path.split("/"))
    if isinstance(key, NotFound):
        return key
    stat = await fs.stat(key)
    if isinstance(stat, NotFound):
        return stat
    if not stat.is_file:
        return NotFound(key=key, reason="not a regular file")
    return StoredObject(key=key, stat=stat, content_type=content_type_for(key))


async def serve_object(path: str, range: str | None, fs: StorageBackend, config: Config) -> Response:
    obj = await find_object(path, fs)
    if isinstance(obj, NotFound):
        return not_found(obj)
    headers = {"Content-Type": obj.content_type, "Cache-Control": config.cache_control}

    if range is None or not is_seekable(obj.content_type) or obj.stat.size == 0:
        body = await fs.read(obj.key)
        if isinstance(body, NotFound):
            return not_found(body)
        logger.debug("Serving %s whole (%d bytes)", obj.key, len(body))
        headers["Content-Length"] = str(len(body))
        return Response(content=body, headers=headers)

    requested = parse_range(range, obj.stat.size)
    body = await fs.read_range(obj.key, requested.start, requested.length)
    if isinstance(body, NotFound):
        return not_found(body)
    if not body:
        return not_found(NotFound(key=obj.key, reason=f"no data at offset {requested.start}"))
    logger.debug("Serving %s range %r as %d bytes", obj.key, range, len(body))
    headers.update(
        {
            "Content-Range": content_range(requested.start, len(body), obj.stat.size),
            "Content-Length": str(len(body)),
            "Accept-Ranges": "bytes",
        }
    )
    return Response(status_code=206, content=body, headers=headers)


async def describe_object(path: str, fs: StorageBackend, config: Config) -> Response:
    obj = await find_object(path, fs)
    if isinstance(obj, NotFound):
        return not_found(obj)
    headers = {
        "Content-Type": obj.content_type,
        "Content-Length": str(obj.stat.size),
        "Cache-Control": config.cache_control,
    }
    if is_seekable(obj.content_type):
        headers["Accept-Ranges"] = "bytes"
    return Response(headers=headers)


@router.get("/api/static/{path:path}")
async def download_object(
    path: Annotated[str, Path()],
    fs: Injected[StorageBackend],
    config: Injected[Config],
    range: Annotated[str | None, Header()] = None,
) -> Response:
    # a failure of any kind is a 404, never a 500
    try:
        return await serve_object(path, range, fs, config)
    except Exception as e:
        return not_found(NotFound(key=path, reason="unexpected error", error=e))


@router.head("/api/static/{path:path}")
async def head_object(
    path: Annotated[str, Path()],
    fs: Injected[StorageBackend],
    config: Injected[Config],
) -> Response:
    try:
        return await describe_object(path, fs, config)
    except Exception as e:
        return not_found(NotFound(key=path, reason="unexpected error", error=e))
