# Remote agent client: HTTP client for the host agent's /fs API.
# Created: 2026-03-02
#
# JSON calls go through _request(); binary transfers (single/bulk download)
# are streamed to disk by _stream_to_file() because they are not JSON.

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import uuid
from pathlib import Path
from typing import Any

import httpx

from pocketfs.config import get_settings

logger = logging.getLogger(__name__)

_TOKEN_HEADER = "X-Weasel-Token"
_CSRF_HEADER = "X-Weasel-Csrf"


class FileSystemError(Exception):
    """Base class for everything the explorer core raises."""


class ApiError(FileSystemError):
    """A request to the remote agent failed (transport error or non-2xx)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationRequired(ApiError):
    """The agent answered 401; the token is missing or expired."""


class ValidationFailed(FileSystemError):
    """Rejected locally before any request was issued."""


class LocalFileError(FileSystemError):
    """Reading or writing a file on this machine failed."""


def _is_json(response: httpx.Response) -> bool:
    return "application/json" in response.headers.get("content-type", "")


def _error_message(response: httpx.Response) -> str:
    """Best human-readable message from an error response."""
    text = response.text
    if text and _is_json(response):
        try:
            data = json.loads(text)
        except ValueError:
            data = None
        if isinstance(data, dict):
            message = data.get("error") or data.get("detail") or data.get("message")
            if message:
                return str(message)
    return text or f"Request failed with {response.status_code}"


def _raise_for_status(response: httpx.Response) -> None:
    if response.status_code == 401:
        raise AuthenticationRequired("Authentication required.", 401)
    if not response.is_success:
        raise ApiError(_error_message(response), response.status_code)


def _discard(path: Path) -> None:
    with contextlib.suppress(OSError):
        path.unlink(missing_ok=True)


def _decode(response: httpx.Response) -> Any:
    if response.status_code == 204 or not response.content:
        return None
    if _is_json(response):
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


class FileSystemClient:
    """Async client for the remote agent's file-system endpoints.

    One ``httpx.AsyncClient`` is kept open for the lifetime of this object;
    use it as an async context manager or call ``aclose()``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        api_prefix: str | None = None,
        auth_token: str | None = None,
        csrf_token: str | None = None,
        timeout: float | None = None,
        transfer_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        prefix = (api_prefix if api_prefix is not None else settings.api_prefix).strip("/")
        self._fs = f"/{prefix}/fs" if prefix else "/fs"
        self.auth_token = auth_token or settings.auth_token
        self.csrf_token = csrf_token or settings.csrf_token or uuid.uuid4().hex
        self.transfer_timeout = transfer_timeout or settings.transfer_timeout

        headers = {"Accept": "application/json", _CSRF_HEADER: self.csrf_token}
        if self.auth_token:
            headers[_TOKEN_HEADER] = self.auth_token

        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout or settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> FileSystemClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _url(self, route: str = "") -> str:
        return f"{self._fs}{route}"

    async def _request(
        self,
        method: str,
        route: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        url = self._url(route)
        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        try:
            resp = await self._http.request(
                method, url, params=params, json=json, data=data, files=files, **kwargs
            )
        except httpx.HTTPError as e:
            raise ApiError(f"Request to {url} failed: {e}") from e

        _raise_for_status(resp)
        return _decode(resp)

    async def _stream_to_file(
        self,
        method: str,
        route: str,
        target: Path,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Path:
        url = self._url(route)
        partial = target.with_name(target.name + ".part")
        try:
            async with self._http.stream(
                method, url, params=params, json=json, timeout=self.transfer_timeout
            ) as resp:
                if not resp.is_success:
                    await resp.aread()
                    _raise_for_status(resp)
                target.parent.mkdir(parents=True, exist_ok=True)
                with open(partial, "wb") as f:
                    async for chunk in resp.aiter_bytes():
                        f.write(chunk)
            partial.replace(target)
        except httpx.HTTPError as e:
            raise ApiError(f"Download from {url} failed: {e}") from e
        except OSError as e:
            raise LocalFileError(f"Could not save {target.name}: {e}") from e
        finally:
            _discard(partial)

        logger.info("Downloaded %s -> %s", url, target)
        return target

    # -- listing / reading --

    async def list_directory(self, path: str) -> Any:
        """Raw listing for ``path``; the empty path lists the drives."""
        params = {"path": path} if path else None
        return await self._request("GET", "", params=params)

    async def list_drives(self) -> Any:
        return await self._request("GET", "/drives")

    async def read_content(self, path: str) -> str:
        result = await self._request("GET", "/content", params={"path": path})
        if result is None:
            return ""
        return result if isinstance(result, str) else json.dumps(result)

    def raw_url(self, path: str) -> str:
        """Absolute URL for inline binary preview (images)."""
        url = httpx.URL(self.base_url + self._url("/raw"))
        return str(url.copy_merge_params({"path": path}))

    # -- single-item mutations --

    async def write_file(self, path: str, content: str) -> None:
        await self._request("POST", "/write", json={"path": path, "content": content})

    async def create_directory(self, parent_path: str, name: str) -> None:
        await self._request("POST", "/directory", json={"parentPath": parent_path, "name": name})

    async def rename(self, path: str, new_name: str) -> None:
        await self._request("POST", "/rename", json={"path": path, "newName": new_name})

    async def delete(self, path: str) -> None:
        await self._request("DELETE", "", params={"path": path})

    # -- bulk --

    async def bulk_delete(self, paths: list[str]) -> None:
        await self._request("POST", "/bulk/delete", json={"paths": list(paths)})

    async def bulk_copy(self, source_paths: list[str], destination_path: str) -> None:
        await self._request(
            "POST",
            "/bulk/copy",
            json={"sourcePaths": list(source_paths), "destinationPath": destination_path},
        )

    async def bulk_move(self, source_paths: list[str], destination_path: str) -> None:
        await self._request(
            "POST",
            "/bulk/move",
            json={"sourcePaths": list(source_paths), "destinationPath": destination_path},
        )

    async def bulk_zip(self, source_paths: list[str], zip_file_path: str) -> None:
        await self._request(
            "POST",
            "/bulk/zip",
            json={"sourcePaths": list(source_paths), "zipFilePath": zip_file_path},
        )

    async def unzip(self, zip_file_path: str, destination_path: str) -> None:
        await self._request(
            "POST",
            "/unzip",
            json={"zipFilePath": zip_file_path, "destinationPath": destination_path},
        )

    # -- transfers --

    async def upload_file(self, destination_dir: str, local_path: Path) -> None:
        """Multipart upload of one local file into ``destination_dir``."""
        local = Path(local_path).expanduser()
        if not local.is_file():
            raise ValidationFailed(f"File not found: {local}")

        try:
            content = await asyncio.to_thread(local.read_bytes)
        except OSError as e:
            raise LocalFileError(f"Could not read {local.name}: {e}") from e

        await self._request(
            "POST",
            "/upload",
            data={"path": destination_dir},
            files={"file": (local.name, content, "application/octet-stream")},
            timeout=self.transfer_timeout,
        )

    async def download_file(self, path: str, target: Path) -> Path:
        return await self._stream_to_file("GET", "/download", target, params={"path": path})

    async def download_bulk(self, paths: list[str], target: Path) -> Path:
        """Stream the agent-built zip of ``paths`` into ``target``."""
        return await self._stream_to_file(
            "POST", "/download/bulk", target, json={"paths": list(paths)}
        )
