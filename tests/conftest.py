from __future__ import annotations

import base64
import json
from pathlib import Path
import sys

import httpx
import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def wrap_base64(text: str) -> str:
    # GitHub returns base64 broken into 60-column lines.
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60)) + "\n"


class FakeContentsApi:
    """
    In-process stand-in for the GitHub contents endpoint of a single file.
    Applies the same sha precondition rules GitHub does.
    """

    def __init__(self) -> None:
        self.content: str | None = None
        self.sha: str | None = None
        self.commits: list[str] = []
        self.requests: list[httpx.Request] = []
        self.fail_with: tuple[int, str] | None = None

    def put_text(self, text: str) -> None:
        self.content = base64.b64encode(text.encode("utf-8")).decode("ascii")
        self.commits.append("out-of-band edit")
        self.sha = f"sha-{len(self.commits)}"

    def stored_json(self) -> dict | None:
        if self.content is None:
            return None
        return json.loads(base64.b64decode(self.content).decode("utf-8"))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            status, message = self.fail_with
            return httpx.Response(status, json={"message": message})

        if request.method == "GET":
            if self.content is None:
                return httpx.Response(404, json={"message": "Not Found"})
            text = base64.b64decode(self.content).decode("utf-8")
            return httpx.Response(200, json={"content": wrap_base64(text), "encoding": "base64", "sha": self.sha})

        if request.method == "PUT":
            body = json.loads(request.content)
            sha = body.get("sha")
            if self.content is not None and sha is None:
                return httpx.Response(422, json={"message": 'Invalid request.\n\n"sha" wasn\'t supplied.'})
            if sha is not None and sha != self.sha:
                return httpx.Response(409, json={"message": f"data/db.json does not match {sha}"})
            created = self.content is None
            self.content = body["content"]
            self.commits.append(body["message"])
            self.sha = f"sha-{len(self.commits)}"
            return httpx.Response(201 if created else 200, json={"content": {"sha": self.sha}})

        return httpx.Response(405, json={"message": "Method Not Allowed"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def contents_api() -> FakeContentsApi:
    return FakeContentsApi()


@pytest.fixture
def github_config():
    from persistence.github_store import GithubStoreConfig

    return GithubStoreConfig(owner="bistro", repo="compliance-data", credential="test-token", path="data/db.json")


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect persistence paths to a temp project directory so tests never touch real ./data.
    """
    import persistence.paths as paths
    import settings

    def _data_dir() -> Path:
        p = tmp_path / "data"
        p.mkdir(parents=True, exist_ok=True)
        return p

    monkeypatch.setattr(paths, "project_root", lambda: tmp_path)
    monkeypatch.setattr(paths, "data_dir", _data_dir)
    monkeypatch.setattr(settings, "data_dir", _data_dir)
    for name in ("GITHUB_CONFIG", "GITHUB_OWNER", "GITHUB_REPO", "GITHUB_TOKEN", "PERSIST_TO_DISK"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def ids():
    """Deterministic id generator: id-1, id-2, ..."""
    counter = {"n": 0}

    def _next() -> str:
        counter["n"] += 1
        return f"id-{counter['n']}"

    return _next
