"""Status and severity normalization utilities.

Centralized helpers reused by the decoder, the engine and the pages. They rely
on the level and status configuration from config.py (SEVERITY_LEVELS,
TASK_STATUSES).
"""

from __future__ import annotations

from .config import SEVERITY_LEVELS, SEVERITY_RANK, STATUS_COMPLETED, STATUS_OPEN

# Legacy and free-form spellings mapped to canonical severity levels
SEVERITY_ALIASES: dict[str, str] = {
    "blocker": "critical",
    "urgent": "critical",
    "major": "high",
    "normal": "medium",
    "minor": "low",
    "trivial": "low",
}

NULL_LIKE: frozenset[str] = frozenset({"", "none", "null", "nan", "undefined", "n/a"})

# Terminal spellings written by older versions of the tracker
COMPLETED_ALIASES: frozenset[str] = frozenset({"completed", "complete", "closed", "done", "resolved"})


def normalize_severity(value: str | None) -> str | None:
    """Map a raw priority/urgency value to a canonical level.

    Parameters
    ----------
    value : str | None
        Raw value from a form or a stored document.

    Returns
    -------
    str | None
        One of SEVERITY_LEVELS, ``None`` for empty/null-like input, or the
        cleaned lowercase text when it matches nothing (callers decide whether
        that is an error).

    Examples
    --------
    >>> normalize_severity(" HIGH ")
    'high'
    >>> normalize_severity("Blocker")
    'critical'
    >>> normalize_severity("")
    """
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in NULL_LIKE:
        return None
    if text in SEVERITY_LEVELS:
        return text
    return SEVERITY_ALIASES.get(text, text)


def is_known_severity(value: str | None) -> bool:
    return value is None or value in SEVERITY_LEVELS


def severity_rank(value: str | None) -> int | None:
    if value is None:
        return None
    return SEVERITY_RANK.get(value)


def normalize_task_status(value: str | None) -> str:
    """Canonicalize a stored task status.

    Missing values become ``open`` and terminal aliases become ``completed``.
    Any other status is kept as written so newer workflow states survive a
    round trip and still count as open.
    """
    if not value:
        return STATUS_OPEN
    text = str(value).strip().lower()
    if not text:
        return STATUS_OPEN
    if text in COMPLETED_ALIASES:
        return STATUS_COMPLETED
    return text


def format_status(value: str | None) -> str:
    """Human label for a status, e.g. ``in-progress`` -> ``In Progress``."""
    if not value:
        return "Open"
    return " ".join(part.capitalize() for part in str(value).replace("-", " ").split())
