# Shared fixtures: isolated settings and an in-process stub of the host agent.
# Created: 2026-03-05

from __future__ import annotations

from typing import Any

import httpx
import pytest
from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from pocketfs.client import FileSystemClient
from pocketfs.config import get_settings
from pocketfs.layout import reset_layout_store
from pocketfs.paths import ensure_trailing_slash, join_path, name_of, parent_of, starts_with

_ENV_KEYS = (
    "API_BASE_URL",
    "API_PREFIX",
    "AUTH_TOKEN",
    "CSRF_TOKEN",
    "HOME_FOLDER",
    "TAIL_INTERVAL",
    "DOWNLOAD_CLEANUP_DELAY",
    "DEFAULT_PAGE_SIZE",
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every local file at tmp_path and drop cached singletons."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(f"POCKETFS_{key}", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("POCKETFS_DOWNLOADS_DIR", str(tmp_path / "downloads"))
    monkeypatch.setenv("POCKETFS_LAYOUT_FILE", str(tmp_path / "layout.json"))
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    reset_layout_store()
    yield
    get_settings.cache_clear()
    reset_layout_store()


def make_item(
    path: str, *, is_directory: bool = False, size: int = 0, modified: str | None = None
):
    """Wire-format (camelCase) listing entry."""
    return {
        "name": name_of(path),
        "fullPath": path,
        "isDirectory": is_directory,
        "sizeBytes": size,
        "modifiedAt": modified or "2026-01-15T10:00:00Z",
    }


class FakeAgent:
    """In-memory Windows-style file tree served over the agent's /api/fs routes."""

    def __init__(self) -> None:
        self.drives = ["C:\\", "D:\\"]
        self.dirs: set[str] = set(self.drives)
        self.files: dict[str, bytes] = {}
        self.calls: list[tuple[str, Any]] = []
        self.failures: dict[str, tuple[int, str]] = {}
        self.token: str | None = None
        self.last_headers: dict[str, str] = {}

    # -- tree setup --

    def add_dir(self, path: str) -> str:
        path = ensure_trailing_slash(path)
        self.dirs.add(path)
        return path

    def add_file(self, path: str, content: str | bytes = b"") -> str:
        self.files[path] = content.encode() if isinstance(content, str) else content
        return path

    def fail(self, route: str, status: int = 500, message: str = "Agent failure") -> None:
        self.failures[route] = (status, message)

    # -- helpers used by the routes --

    def record(self, route: str, payload: Any = None) -> None:
        self.calls.append((route, payload))
        if route in self.failures:
            status, message = self.failures[route]
            raise HTTPException(status_code=status, detail=message)

    def routes_called(self) -> list[str]:
        return [route for route, _ in self.calls]

    def listing(self, directory: str) -> list[dict]:
        items = [
            make_item(d, is_directory=True)
            for d in sorted(self.dirs)
            if d not in self.drives and parent_of(d) == directory
        ]
        items += [
            make_item(f, size=len(data))
            for f, data in sorted(self.files.items())
            if parent_of(f) == directory
        ]
        return items

    def exists(self, path: str) -> bool:
        return path in self.files or ensure_trailing_slash(path) in self.dirs

    def remove(self, path: str) -> None:
        if path in self.files:
            del self.files[path]
            return
        directory = ensure_trailing_slash(path)
        if directory not in self.dirs:
            raise HTTPException(status_code=404, detail=f"Not found: {path}")
        self.dirs = {d for d in self.dirs if not starts_with(d, directory)}
        self.files = {f: b for f, b in self.files.items() if not starts_with(f, directory)}

    def copy(self, source: str, destination: str, name: str | None = None) -> None:
        name = name or name_of(source)
        if source in self.files:
            self.files[join_path(destination, name)] = self.files[source]
            return
        source_dir = ensure_trailing_slash(source)
        target_dir = ensure_trailing_slash(join_path(destination, name))
        for d in [d for d in self.dirs if starts_with(d, source_dir)]:
            self.dirs.add(target_dir + d[len(source_dir) :])
        for f, data in list(self.files.items()):
            if starts_with(f, source_dir):
                self.files[target_dir + f[len(source_dir) :]] = data


def build_agent_app(agent: FakeAgent) -> FastAPI:
    app = FastAPI()

    @app.middleware("http")
    async def check_token(request: Request, call_next):
        agent.last_headers = dict(request.headers)
        if agent.token and request.headers.get("x-weasel-token") != agent.token:
            return JSONResponse({"error": "Unauthorized"}, status_code=401)
        return await call_next(request)

    @app.get("/api/fs")
    async def list_directory(path: str | None = None):
        agent.record("list", path)
        if not path:
            return [make_item(d, is_directory=True) for d in agent.drives]
        directory = ensure_trailing_slash(path)
        if directory not in agent.dirs:
            raise HTTPException(status_code=404, detail="Directory not found")
        return agent.listing(directory)

    @app.delete("/api/fs")
    async def delete(path: str):
        agent.record("delete", path)
        agent.remove(path)
        return Response(status_code=204)

    @app.get("/api/fs/drives")
    async def drives():
        agent.record("drives")
        return [make_item(d, is_directory=True) for d in agent.drives]

    @app.get("/api/fs/content")
    async def content(path: str):
        agent.record("content", path)
        if path not in agent.files:
            raise HTTPException(status_code=404, detail="File not found")
        return PlainTextResponse(agent.files[path].decode())

    @app.post("/api/fs/write")
    async def write(payload: dict):
        agent.record("write", payload)
        agent.add_file(payload["path"], payload["content"])
        return Response(status_code=204)

    @app.post("/api/fs/directory")
    async def create_directory(payload: dict):
        agent.record("directory", payload)
        agent.add_dir(join_path(payload["parentPath"], payload["name"]))
        return {"success": True}

    @app.post("/api/fs/rename")
    async def rename(payload: dict):
        agent.record("rename", payload)
        source = payload["path"]
        target = join_path(parent_of(source), payload["newName"])
        if source in agent.files:
            agent.files[target] = agent.files.pop(source)
        else:
            agent.copy(source, parent_of(source), name=payload["newName"])
            agent.remove(source)
        return {"success": True}

    @app.post("/api/fs/bulk/delete")
    async def bulk_delete(payload: dict):
        agent.record("bulk/delete", payload)
        for path in payload["paths"]:
            if agent.exists(path):
                agent.remove(path)
        return Response(status_code=204)

    @app.post("/api/fs/bulk/copy")
    async def bulk_copy(payload: dict):
        agent.record("bulk/copy", payload)
        for source in payload["sourcePaths"]:
            agent.copy(source, payload["destinationPath"])
        return {"success": True}

    @app.post("/api/fs/bulk/move")
    async def bulk_move(payload: dict):
        agent.record("bulk/move", payload)
        for source in payload["sourcePaths"]:
            agent.copy(source, payload["destinationPath"])
            agent.remove(source)
        return {"success": True}

    @app.post("/api/fs/bulk/zip")
    async def bulk_zip(payload: dict):
        agent.record("bulk/zip", payload)
        agent.add_file(payload["zipFilePath"], b"PK\x03\x04zip")
        return {"success": True}

    @app.post("/api/fs/unzip")
    async def unzip(payload: dict):
        agent.record("unzip", payload)
        agent.add_dir(join_path(payload["destinationPath"], "extracted"))
        return {"success": True}

    @app.post("/api/fs/upload")
    async def upload(path: str = Form(...), file: UploadFile = File(...)):
        data = await file.read()
        agent.record("upload", {"path": path, "filename": file.filename, "size": len(data)})
        agent.add_file(join_path(path, file.filename), data)
        return {"success": True}

    @app.get("/api/fs/download")
    async def download(path: str):
        agent.record("download", path)
        if path not in agent.files:
            raise HTTPException(status_code=404, detail="File not found")
        return Response(content=agent.files[path], media_type="application/octet-stream")

    @app.post("/api/fs/download/bulk")
    async def download_bulk(payload: dict):
        agent.record("download/bulk", payload)
        body = b"PK" + "|".join(payload["paths"]).encode()
        return Response(content=body, media_type="application/zip")

    return app


@pytest.fixture
def agent():
    return FakeAgent()


@pytest.fixture
async def fs_client(agent):
    client = FileSystemClient(
        "http://agent.test",
        auth_token="secret-token",
        csrf_token="csrf-token",
        transport=httpx.ASGITransport(app=build_agent_app(agent)),
    )
    yield client
    await client.aclose()

