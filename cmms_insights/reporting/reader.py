"""
Report reader: discovers and loads the latest report files.

Loaders return ``None`` rather than raising when no file is found or the file
cannot be parsed, so the CLI and dashboard can show a "no data yet" message.

Files are named ``{kind}_{YYYY-MM-DD}.{ext}`` (see ``reporting.export``).
``find_latest_file()`` picks the most recently modified match.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def find_latest_file(directory: Path, glob_pattern: str) -> Optional[Path]:
    """Return the most recently modified file matching ``glob_pattern``, or None."""
    if not directory.exists():
        return None
    matches = list(directory.glob(glob_pattern))
    if not matches:
        return None
    return max(matches, key=lambda p: p.stat().st_mtime)


def report_age_days(generated_at: Optional[str], today: Optional[date] = None) -> Optional[int]:
    """Whole days between a report's ``generated_at`` date and ``today``.

    Returns ``None`` when ``generated_at`` is missing or not an ISO date.
    """
    if not generated_at:
        return None
    try:
        generated = datetime.fromisoformat(generated_at).date()
    except ValueError:
        return None
    return ((today or date.today()) - generated).days


def load_latest_report(kind: str, output_dir: Path) -> Optional[dict]:
    """Load the newest ``{kind}_*.json`` in ``output_dir``.

    Args:
        kind:       ``"risk"``, ``"analytics"`` or ``"recommendations"``.
        output_dir: Report directory.

    Returns:
        Parsed JSON dict, or None.
    """
    path = find_latest_file(output_dir, f"{kind}_*.json")
    if path is None:
        logger.debug("No %s report found in %s", kind, output_dir)
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to load %s report %s: %s", kind, path, exc)
        return None
