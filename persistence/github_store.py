from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from .documents import ChecklistDocument
from .errors import ConflictError, DecodeError, RemoteFetchError, RemoteWriteError
from .interfaces import VersionedDocumentStore
from .transport import decode_content, encode_content, parse_document, serialize_document

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=10.0)


@dataclass(frozen=True)
class GithubStoreConfig:
    owner: str
    repo: str
    credential: str
    path: str = "data/db.json"
    branch: str | None = None
    api_url: str = DEFAULT_API_URL

    @property
    def contents_url(self) -> str:
        base = self.api_url.rstrip("/")
        return f"{base}/repos/{self.owner}/{self.repo}/contents/{quote(self.path.lstrip('/'))}"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.reason_phrase


class GithubDocumentStore(VersionedDocumentStore):
    """
    Keeps the document as a single file in a GitHub repository, via the
    contents API. The file's blob sha is the version token; GitHub rejects
    a PUT whose sha is stale, which is what makes concurrent writers safe.

    Pass a preconfigured httpx.AsyncClient (e.g. with a MockTransport) in
    tests; otherwise a short-lived client is opened per call.
    """

    def __init__(self, config: GithubStoreConfig, client: httpx.AsyncClient | None = None):
        self._config = config
        self._client = client

    @property
    def config(self) -> GithubStoreConfig:
        return self._config

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.credential}",
            "Accept": "application/vnd.github+json",
        }

    async def _request(self, method: str, **kwargs: Any) -> httpx.Response:
        url = self._config.contents_url
        if self._client is not None:
            return await self._client.request(method, url, headers=self._headers(), **kwargs)
        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
            return await client.request(method, url, headers=self._headers(), **kwargs)

    async def load(self) -> tuple[ChecklistDocument | None, str | None]:
        params = {"ref": self._config.branch} if self._config.branch else None
        try:
            response = await self._request("GET", params=params)
        except httpx.HTTPError as e:
            raise RemoteFetchError(f"Failed to fetch data from GitHub: {e!r}") from e

        if response.status_code == 404:
            logger.info("Data file %s not found in repository; store is uninitialized.", self._config.path)
            return None, None
        if response.is_error:
            raise RemoteFetchError(
                f"Failed to fetch data from GitHub: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise DecodeError(f"GitHub returned a non-JSON response: {e}") from e
        if not isinstance(body, dict) or not isinstance(body.get("content"), str):
            raise DecodeError(f"GitHub response for {self._config.path} has no file content")
        if body.get("encoding", "base64") != "base64":
            raise DecodeError(f"Unsupported content encoding: {body.get('encoding')!r}")

        sha = body.get("sha")
        if not isinstance(sha, str) or not sha:
            raise DecodeError(f"GitHub response for {self._config.path} has no sha")

        document = parse_document(decode_content(body["content"]))
        return document, sha

    async def save(self, document: ChecklistDocument, expected_token: str | None, description: str) -> None:
        payload: dict[str, Any] = {
            "message": description,
            "content": encode_content(serialize_document(document)),
        }
        if expected_token is not None:
            payload["sha"] = expected_token
        if self._config.branch:
            payload["branch"] = self._config.branch

        try:
            response = await self._request("PUT", json=payload)
        except httpx.HTTPError as e:
            raise RemoteWriteError(f"Failed to update data on GitHub: {e!r}") from e

        if response.is_success:
            logger.info("GITHUB COMMIT: %s (%s)", description, self._config.path)
            return

        message = _error_message(response)
        if response.status_code in (409, 412):
            raise ConflictError(f"Failed to update data on GitHub: {message}", status_code=response.status_code)
        # Creating over an existing file is reported as 422 "sha wasn't supplied".
        if response.status_code == 422 and expected_token is None and "sha" in message.lower():
            raise ConflictError(f"Failed to update data on GitHub: {message}", status_code=422)
        raise RemoteWriteError(f"Failed to update data on GitHub: {message}", status_code=response.status_code)
