from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Union

import httpx


class DirectoryTransport(httpx.AsyncBaseTransport):
    """
    Serve GET requests from a local directory, mapping the URL path onto files.

    Lets the loader read a checked-out data folder with the exact same code path
    (status codes included) it uses against a static web server.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root).resolve()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.method != "GET":
            return httpx.Response(405, request=request)

        rel = request.url.path.lstrip("/")
        target = (self.root / rel).resolve()

        if self.root not in target.parents or not target.is_file():
            return httpx.Response(404, request=request)

        return httpx.Response(
            200,
            content=await asyncio.to_thread(target.read_bytes),
            headers={"Content-Type": "application/json"},
            request=request,
        )
