from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from aioaws.s3 import S3Client, S3Config
from httpx import AsyncClient, HTTPError, Response
from rangeserve.storage import NotFound, ObjectStat
from rangeserve.storage import StorageBackend


@dataclass
class S3Storage(StorageBackend):
    client: AsyncClient
    bucket: str
    access_key_id: str
    access_key_secret: str
    region: str
    endpoint: str | None = None
    prefix: str = ""

    @classmethod
    @asynccontextmanager
    async def connect(
        cls,
        bucket: str,
        access_key_id: str,
        access_key_secret: str,
        region: str,
        endpoint: str | None = None,
        prefix: str = "",
    ) -> AsyncIterator[S3Storage]:
        async with AsyncClient() as client:
            yield cls(client, bucket, access_key_id, access_key_secret, region, endpoint, prefix)

    def _get_client(self) -> S3Client:
        return S3Client(
            self.client,
            S3Config(
                aws_access_key=self.access_key_id,
                aws_secret_key=self.access_key_secret,
                aws_region=self.region,
                aws_s3_bucket=self.bucket,
                aws_host=self.endpoint,
            ),
        )

    def _object_key(self, key: str) -> str:
        prefix = self.prefix.strip("/")
        return f"{prefix}/{key}" if prefix else key

    async def _request(self, method: str, key: str, headers: dict[str, str] | None = None) -> Response | NotFound:
        url = self._get_client().signed_download_url(self._object_key(key), method=method)
        try:
            response = await self.client.request(method, url, headers=headers)
            if response.status_code in (403, 404):
                return NotFound(key=key, reason=f"{method} returned {response.status_code}")
            response.raise_for_status()
        except HTTPError as e:
            return NotFound(key=key, reason=f"{method} failed", error=e)
        return response

    async def stat(self, key: str) -> ObjectStat | NotFound:
        # S3 has no directories; keys ending in "/" are folder placeholders
        if key.endswith("/"):
            return ObjectStat(size=0, is_file=False)
        response = await self._request("HEAD", key)
        if isinstance(response, NotFound):
            return response
        try:
            size = int(response.headers["Content-Length"])
        except (KeyError, ValueError) as e:
            return NotFound(key=key, reason="HEAD returned no usable Content-Length", error=e)
        return ObjectStat(size=size, is_file=True)

    async def read(self, key: str) -> bytes | NotFound:
        response = await self._request("GET", key)
        if isinstance(response, NotFound):
            return response
        return response.content

    async def read_range(self, key: str, start: int, length: int) -> bytes | NotFound:
        response = await self._request("GET", key, headers={"Range": f"bytes={start}-{start + length - 1}"})
        if isinstance(response, NotFound):
            return response
        if response.status_code == 206:
            return response.content
        # the endpoint ignored the range and sent the whole object
        return response.content[start : start + length]
