"""Central configuration, constants, storage settings, and shared column definitions."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

# =============================================================================
# Display Settings
# =============================================================================
TIMEZONE = "UTC"
APP_TITLE = "Game Design Review"

# =============================================================================
# Task Categories
# =============================================================================
# Fixed concatenation order used whenever all categories are combined
CATEGORIES: Sequence[str] = ("bug", "controls", "quest", "review")
REVIEW_CATEGORY = "review"
ALL = "all"

CATEGORY_LABELS: dict[str, str] = {
    "bug": "Bug",
    "controls": "Controls",
    "quest": "Quest",
    "review": "Review",
}

# =============================================================================
# Priority / Urgency Configuration
# =============================================================================
SEVERITY_LEVELS: Sequence[str] = ("critical", "high", "medium", "low")

SEVERITY_RANK: dict[str, int] = {
    "critical": 4,
    "high": 3,
    "medium": 2,
    "low": 1,
}

# =============================================================================
# Task / Comment Status Configuration
# =============================================================================
STATUS_OPEN = "open"
STATUS_COMPLETED = "completed"
TASK_STATUSES: Sequence[str] = (STATUS_OPEN, STATUS_COMPLETED)

COMMENT_STATUSES: Sequence[str] = ("open", "resolved", "closed")

# Placeholders for weak member references that no longer resolve
UNASSIGNED_LABEL = "Unassigned"
UNKNOWN_LABEL = "Unknown"

# =============================================================================
# Media Links
# =============================================================================
# Host fragment -> media kind (first match wins)
MEDIA_HOSTS: Sequence[tuple[str, str]] = (
    ("youtube.com", "youtube"),
    ("youtu.be", "youtube"),
    ("drive.google.com", "google_drive"),
    ("imgur.com", "imgur"),
)
MEDIA_KIND_LABELS: dict[str, str] = {
    "youtube": "YouTube Video",
    "google_drive": "Google Drive File",
    "imgur": "Imgur Image",
    "generic": "Link",
}

# =============================================================================
# Persistence
# =============================================================================
GAMES_COLLECTION = "games"
MEMBERS_COLLECTION = "members"

STORAGE_BACKENDS: Sequence[str] = ("sqlite", "github")
DEFAULT_STORAGE_BACKEND = "sqlite"
DEFAULT_DB_PATH = str(Path.home() / ".local" / "share" / "game-review" / "review.db")

GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITHUB_BRANCH = "main"
DEFAULT_GITHUB_DATA_DIR = "data"
DEFAULT_REQUEST_TIMEOUT = 15.0  # seconds

# =============================================================================
# Table Columns
# =============================================================================
TASK_CORE_COLUMNS: Sequence[str] = (
    "id",
    "title",
    "category",
    "priority",
    "urgency",
    "status",
    "assignee",
    "comments_count",
    "media_count",
    "days_open",
    "days_since_update",
    "created",
    "updated",
)

DISPLAY_ORDER_TASK_LIST: Sequence[str] = (
    "title",
    "category",
    "status",
    "priority",
    "urgency",
    "assignee",
    "comments_count",
    "media_count",
    "days_open",
    "created",
)

DISPLAY_ORDER_DELETED: Sequence[str] = (
    "title",
    "category",
    "status",
    "deleted",
    "deleted_by",
    "delete_reason",
    "created",
)


@dataclass(slots=True)
class AppSettings:
    max_table_rows: int = 1000
    download_encoding: str = "utf-8"
    description_preview_chars: int = 200


SETTINGS = AppSettings()


@dataclass(slots=True)
class StorageSettings:
    backend: str = DEFAULT_STORAGE_BACKEND
    db_path: str = DEFAULT_DB_PATH
    github_owner: str = ""
    github_repo: str = ""
    github_branch: str = DEFAULT_GITHUB_BRANCH
    github_data_dir: str = DEFAULT_GITHUB_DATA_DIR
    github_token: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


# Setting name -> (secrets key, environment variable)
_STORAGE_KEYS: dict[str, tuple[str, str]] = {
    "backend": ("STORAGE_BACKEND", "REVIEW_STORAGE_BACKEND"),
    "db_path": ("DB_PATH", "REVIEW_DB_PATH"),
    "github_owner": ("GITHUB_OWNER", "REVIEW_GITHUB_OWNER"),
    "github_repo": ("GITHUB_REPO", "REVIEW_GITHUB_REPO"),
    "github_branch": ("GITHUB_BRANCH", "REVIEW_GITHUB_BRANCH"),
    "github_data_dir": ("GITHUB_DATA_DIR", "REVIEW_GITHUB_DATA_DIR"),
    "github_token": ("GITHUB_TOKEN", "GITHUB_TOKEN"),
    "request_timeout": ("REQUEST_TIMEOUT", "REVIEW_REQUEST_TIMEOUT"),
}


def _lookup_secret(secrets: Mapping[str, Any], key: str) -> Any:
    for section in ("storage", "github"):
        block = secrets.get(section) or {}
        if isinstance(block, Mapping) and block.get(key):
            return block.get(key)
    return secrets.get(key)


def load_storage_settings(
    secrets: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> StorageSettings:
    """Resolve storage settings from secrets, then environment, then defaults.

    Parameters
    ----------
    secrets : Mapping or None
        Streamlit secrets (``st.secrets``) or any mapping with the same shape.
        ``[storage]`` and ``[github]`` sections are searched before top-level keys.
    env : Mapping or None
        Environment mapping; defaults to ``os.environ``.

    Returns
    -------
    StorageSettings
        Fully populated settings. Unknown backends fall back to the default.
    """
    try:
        secrets = dict(secrets) if secrets is not None else {}
    except FileNotFoundError:
        # st.secrets raises when no secrets.toml exists
        secrets = {}
    env = os.environ if env is None else env
    settings = StorageSettings()
    for attr, (secret_key, env_key) in _STORAGE_KEYS.items():
        value = _lookup_secret(secrets, secret_key) or env.get(env_key)
        if value in (None, ""):
            continue
        if attr == "request_timeout":
            try:
                value = float(value)
            except (TypeError, ValueError):
                continue
        else:
            value = str(value).strip()
        setattr(settings, attr, value)
    settings.backend = settings.backend.lower()
    if settings.backend not in STORAGE_BACKENDS:
        settings.backend = DEFAULT_STORAGE_BACKEND
    return settings
