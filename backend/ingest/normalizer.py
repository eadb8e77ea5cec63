"""Best-effort title extraction from release-style file and directory names."""
from __future__ import annotations

import logging

import PTN

logger = logging.getLogger(__name__)


def normalize(raw_name: str) -> str:
    """Return the clean title parsed from ``raw_name`` or ``""`` on a miss."""

    if not raw_name or not raw_name.strip():
        return ""
    try:
        parsed = PTN.parse(raw_name)
    except Exception as exc:  # noqa: BLE001 - parser failures degrade to an empty title
        logger.debug("Title parser failed for %r: %s", raw_name, exc)
        return ""

    title = parsed.get("title") if isinstance(parsed, dict) else None
    if not isinstance(title, str) or not title.strip():
        logger.debug("No title extracted from %r", raw_name)
        return ""
    return title.strip()
