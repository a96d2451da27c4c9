"""
FILE: todopro/core/export.py
PURPOSE: Export tasks, reminders and notes as one JSON document
EXPORTS:
  - build_export(tasks, reminders, notes, now) -> dict
  - export_filename(prefix, now) -> str
  - write_export(document, directory, prefix, now) -> Path
DEPENDENCIES:
  - json, logging, pathlib, datetime, typing (stdlib)
  - todopro.core.filters (valid_tasks)
NOTES:
  - Incomplete tasks (no id or title) are left out
  - Missing description/due_date/completed_at export as "" so every task
    record has the same keys
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .constants import EXPORT_VERSION, EXPORTED_BY
from .filters import valid_tasks

logger = logging.getLogger(__name__)


def build_export(
    tasks: Iterable,
    reminders: Iterable = (),
    notes: Iterable = (),
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Assemble the export document.

    Returns:
        {"exportInfo": {...}, "tasks": [...], "reminders": [...], "notes": [...]}
    """
    now = now or datetime.now()

    exported_tasks = []
    for task in valid_tasks(tasks):
        record = task.to_dict()
        for key in ("description", "due_date", "completed_at"):
            record[key] = record[key] or ""
        exported_tasks.append(record)

    return {
        "exportInfo": {
            "exportDate": now.isoformat(),
            "exportedBy": EXPORTED_BY,
            "version": EXPORT_VERSION,
        },
        "tasks": exported_tasks,
        "reminders": [r.to_dict() for r in reminders],
        "notes": [n.to_dict() for n in notes],
    }


def export_filename(prefix: str, now: Optional[datetime] = None) -> str:
    """e.g. "todopro-export-2024-03-01.json"."""
    now = now or datetime.now()
    return f"{prefix}-export-{now.date().isoformat()}.json"


def write_export(
    document: Dict[str, Any],
    directory: Path,
    prefix: str = "todopro",
    now: Optional[datetime] = None,
) -> Path:
    """
    Write the document to <directory>/<prefix>-export-<date>.json.

    Returns:
        Path of the written file (overwritten if it already exists)
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(prefix, now)
    path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Exported %d tasks to %s", len(document.get("tasks", [])), path)
    return path
