import asyncio
import hashlib
import io
import tarfile
from pathlib import Path
from typing import Dict, List, Optional, Set

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from zig_installer.types import RunConfig

VERSION = "0.11.0"
PLATFORM = "x86_64-linux"
TOP_DIR = "zig-linux-x86_64-0.11.0"
ZIG_BINARY = b"#!/bin/sh\necho zig 0.11.0\n"
STD_SOURCE = b"pub const std = @This();\n"


def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _add_dir(tar: tarfile.TarFile, name: str) -> None:
    info = tarfile.TarInfo(name)
    info.type = tarfile.DIRTYPE
    info.mode = 0o755
    tar.addfile(info)


def _add_file(tar: tarfile.TarFile, name: str, data: bytes, mode: int = 0o644) -> None:
    info = tarfile.TarInfo(name)
    info.size = len(data)
    info.mode = mode
    tar.addfile(info, io.BytesIO(data))


def build_release_archive(compression: str = "gz", with_lib: bool = True) -> bytes:
    """Build a release tarball laid out like the official ones"""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode=f"w:{compression}") as tar:
        _add_dir(tar, TOP_DIR)
        _add_file(tar, f"{TOP_DIR}/zig", ZIG_BINARY, mode=0o755)
        _add_file(tar, f"{TOP_DIR}/LICENSE", b"MIT\n")
        if with_lib:
            _add_dir(tar, f"{TOP_DIR}/lib")
            _add_dir(tar, f"{TOP_DIR}/lib/std")
            _add_file(tar, f"{TOP_DIR}/lib/std/std.zig", STD_SOURCE)
    return buf.getvalue()


class ReleaseServer:
    """Local HTTP server standing in for the download site"""

    def __init__(self):
        self.index: Dict = {}
        self.raw_index: Optional[bytes] = None
        self.files: Dict[str, bytes] = {}
        self.statuses: Dict[str, int] = {}
        self.requests: List[str] = []
        self.delays: Dict[str, float] = {}
        self.slow: Set[str] = set()
        self.truncated: Set[str] = set()

        app = web.Application()
        app.router.add_get("/{name}", self.handle)
        self.server = TestServer(app)

    async def handle(self, request: web.Request) -> web.StreamResponse:
        name = request.match_info["name"]
        self.requests.append(name)

        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if name in self.statuses:
            return web.Response(status=self.statuses[name])
        if name == "index.json":
            if self.raw_index is not None:
                return web.Response(body=self.raw_index, content_type="application/json")
            return web.json_response(self.index)
        if name in self.slow:
            return await self._stream(request, self.files[name], pause=0.1)
        if name in self.truncated:
            data = self.files[name]
            return await self._stream(request, data[: len(data) // 2], size=len(data))
        if name in self.files:
            return web.Response(body=self.files[name])
        return web.Response(status=404)

    async def _stream(
        self,
        request: web.Request,
        data: bytes,
        size: Optional[int] = None,
        pause: float = 0,
    ) -> web.StreamResponse:
        """Send ``data`` in 1 KiB pieces, announcing ``size`` bytes"""
        response = web.StreamResponse()
        response.content_length = len(data) if size is None else size
        response.force_close()
        await response.prepare(request)
        for start in range(0, len(data), 1024):
            await response.write(data[start:start + 1024])
            if pause:
                await asyncio.sleep(pause)
        return response

    def url(self, name: str) -> str:
        return str(self.server.make_url(f"/{name}"))

    @property
    def index_url(self) -> str:
        return self.url("index.json")

    @property
    def downloads(self) -> List[str]:
        return [name for name in self.requests if name != "index.json"]

    def publish(
        self,
        name: str,
        data: bytes,
        version: str = VERSION,
        platform: str = PLATFORM,
        shasum: Optional[str] = None,
    ) -> str:
        """Serve ``data`` as the release archive for version/platform"""
        self.files[name] = data
        self.index.setdefault(version, {"date": "2023-08-04"})[platform] = {
            "tarball": self.url(name),
            "shasum": shasum if shasum is not None else sha256(data),
            "size": str(len(data)),
        }
        return self.url(name)


@pytest_asyncio.fixture
async def release_server():
    """Start a release server for one test"""
    server = ReleaseServer()
    await server.server.start_server()
    try:
        yield server
    finally:
        await server.server.close()


@pytest.fixture
def run_config(tmp_path: Path, release_server: ReleaseServer) -> RunConfig:
    """Configuration pointing every path into tmp_path"""
    return RunConfig(
        tar_dest=tmp_path / "downloads" / "zig.tar.gz",
        dest=tmp_path / "scratch",
        bin_dir=tmp_path / "prefix" / "bin",
        lib_dir=tmp_path / "prefix" / "lib",
        index_url=release_server.index_url,
        version=VERSION,
    )


@pytest.fixture
def extracted_release(tmp_path: Path) -> RunConfig:
    """Scratch directory that already holds an extracted release"""
    dest = tmp_path / "scratch"
    (dest / "lib" / "std").mkdir(parents=True)
    (dest / "zig").write_bytes(ZIG_BINARY)
    (dest / "lib" / "std" / "std.zig").write_bytes(STD_SOURCE)
    return RunConfig(
        tar_dest=tmp_path / "zig.tar.gz",
        dest=dest,
        bin_dir=tmp_path / "prefix" / "bin",
        lib_dir=tmp_path / "prefix" / "lib",
        index_url="http://unused.invalid/index.json",
        version=VERSION,
    )
