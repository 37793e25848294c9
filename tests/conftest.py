"""shared fixtures: in-memory archives and a stub runtime endpoint."""
import io
import sys
import tarfile
import zipfile
from pathlib import Path

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from runtimekit.domain.models import RuntimeEndpoints
from runtimekit.registry.http import USER_AGENT

CATALOG = ["1.1.1", "3.3.3", "2.2.2"]


def build_zip(files: dict) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def build_targz(files: dict, symlinks: dict = None) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            data = content.encode() if isinstance(content, str) else content
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755 if name.startswith("bin/") else 0o644
            tar.addfile(info, io.BytesIO(data))
        for name, target in (symlinks or {}).items():
            info = tarfile.TarInfo(name)
            info.type = tarfile.SYMTYPE
            info.linkname = target
            tar.addfile(info)
    return buffer.getvalue()


@pytest.fixture
def dummy_zip():
    return build_zip({"lib/foo.txt": "foo", "bin/dart": "#!/bin/sh\n"})


@pytest.fixture
def dummy_targz():
    return build_targz({"lib/foo.txt": "foo", "bin/ruby": "#!/bin/sh\n"})


@pytest.fixture
def endpoints():
    return RuntimeEndpoints(
        versions_url="http://runtimes.test/?runtime={runtime}&getversions=1",
        tarball_url="http://runtimes.test/?runtime={runtime}&version={version}",
        sdk_url="http://runtimes.test/?version={version}",
    )


class StubServer:
    """answers like the runtime endpoint; records every request it sees."""

    def __init__(self, status: int = 0, archive: bytes = None, catalog=None):
        self.status = status
        self.archive = archive
        self.catalog = CATALOG if catalog is None else catalog
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("user-agent") != USER_AGENT:
            return httpx.Response(404)
        if self.status and self.status != 200:
            return httpx.Response(self.status)
        if request.url.params.get("getversions") == "1":
            return httpx.Response(200, json=self.catalog)
        return httpx.Response(200, content=self.archive or b"")

    @property
    def archive_requests(self):
        return [r for r in self.requests if r.url.params.get("getversions") != "1"]

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))
