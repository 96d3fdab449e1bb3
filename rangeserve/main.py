import logging
import os
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Mapping

import anyio
from fastapi import FastAPI

from rangeserve.api import Config, router
from rangeserve.depends import bind
from rangeserve.storage import StorageBackend

logger = logging.getLogger(__name__)


def make_app(
    storage: StorageBackend,
    config: Config,
) -> FastAPI:
    app = FastAPI()
    app.include_router(router)
    bind(app, StorageBackend, storage)
    bind(app, Config, config)
    return app


async def storage_from_env(stack: AsyncExitStack, environ: Mapping[str, str]) -> StorageBackend:
    from rangeserve.storage.local import LocalStorage
    from rangeserve.storage.s3 import S3Storage

    bucket = environ.get("RANGESERVE_S3_BUCKET")
    if bucket:
        logger.info("Serving objects from s3://%s", bucket)
        return await stack.enter_async_context(
            S3Storage.connect(
                bucket=bucket,
                access_key_id=environ.get("AWS_ACCESS_KEY_ID", ""),
                access_key_secret=environ.get("AWS_SECRET_ACCESS_KEY", ""),
                region=environ.get("RANGESERVE_S3_REGION", "us-east-1"),
                endpoint=environ.get("RANGESERVE_S3_ENDPOINT"),
                prefix=environ.get("RANGESERVE_S3_PREFIX", ""),
            )
        )
    root = Path(environ.get("RANGESERVE_ROOT", Path.cwd() / "public" / "uploads"))
    logger.info("Serving files from %s", root)
    return LocalStorage(root)


async def main() -> None:
    import uvicorn

    environ = os.environ
    log_level = environ.get("RANGESERVE_LOG_LEVEL", "info")
    logging.basicConfig(level=log_level.upper())

    async with AsyncExitStack() as stack:
        fs = await storage_from_env(stack, environ)
        config = Config(cache_max_age=int(environ.get("RANGESERVE_CACHE_MAX_AGE", 86400)))
        app = make_app(fs, config)

        server_config = uvicorn.Config(
            app,
            host=environ.get("RANGESERVE_HOST", "0.0.0.0"),
            port=int(environ.get("RANGESERVE_PORT", 8000)),
            log_level=log_level,
        )
        server = uvicorn.Server(server_config)
        await server.serve()


if __name__ == "__main__":
    anyio.run(main)
