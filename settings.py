from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass

from persistence.disk_store import DiskDocumentStore
from persistence.github_store import DEFAULT_API_URL, GithubDocumentStore, GithubStoreConfig
from persistence.interfaces import VersionedDocumentStore
from persistence.memory_store import InMemoryDocumentStore
from persistence.paths import data_dir, document_path

logger = logging.getLogger(__name__)

DEFAULT_FILE_PATH = "data/db.json"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Remote document store (None when not configured)
    github: GithubStoreConfig | None

    # Local fallback when GitHub is not configured
    persist_to_disk: bool
    local_file_name: str

    # Address stamped on submissions for manager alerts
    manager_email: str

    # Debug
    debug_log_requests: bool


def _github_from_json(raw: str) -> GithubStoreConfig:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse GitHub configuration: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Failed to parse GitHub configuration: expected a JSON object")
    try:
        return GithubStoreConfig(
            owner=str(data["owner"]),
            repo=str(data["repo"]),
            credential=str(data["token"]),
            path=str(data.get("filePath") or DEFAULT_FILE_PATH),
            branch=data.get("branch") or None,
            api_url=str(data.get("apiUrl") or DEFAULT_API_URL),
        )
    except KeyError as e:
        raise ValueError(f"Failed to parse GitHub configuration: missing {e.args[0]!r}") from e


def _github_from_env() -> GithubStoreConfig | None:
    raw = os.getenv("GITHUB_CONFIG")
    if raw:
        return _github_from_json(raw)

    owner = os.getenv("GITHUB_OWNER", "").strip()
    repo = os.getenv("GITHUB_REPO", "").strip()
    token = os.getenv("GITHUB_TOKEN", "").strip()
    if not (owner and repo and token):
        return None
    return GithubStoreConfig(
        owner=owner,
        repo=repo,
        credential=token,
        path=os.getenv("GITHUB_FILE_PATH", DEFAULT_FILE_PATH),
        branch=os.getenv("GITHUB_BRANCH") or None,
        api_url=os.getenv("GITHUB_API_URL", DEFAULT_API_URL),
    )


def get_settings() -> Settings:
    return Settings(
        github=_github_from_env(),
        persist_to_disk=_env_bool("PERSIST_TO_DISK", False),
        local_file_name=os.getenv("LOCAL_FILE_NAME", "db.json"),
        manager_email=os.getenv("MANAGER_EMAIL", "manager@restaurant-app-alerts.com"),
        debug_log_requests=_env_bool("DEBUG_LOG_REQUESTS", True),
    )


def build_document_store(settings: Settings) -> VersionedDocumentStore:
    if settings.github is not None:
        logger.info(
            "Using GitHub document store %s/%s:%s",
            settings.github.owner,
            settings.github.repo,
            settings.github.path,
        )
        return GithubDocumentStore(settings.github)
    if settings.persist_to_disk:
        path = document_path(data_dir(), settings.local_file_name)
        logger.info("Using disk document store at %s", path)
        return DiskDocumentStore(path)
    logger.warning("GitHub configuration not provided. Using in-memory data; all changes are lost on restart.")
    return InMemoryDocumentStore()
