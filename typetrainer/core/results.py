from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from typetrainer.core.session import SessionSummary

logger = logging.getLogger(__name__)


class ResultStore:
    """Appends finished sessions to a JSON-lines file, one record per line.

    File: ~/.typetrainer/results.jsonl unless another path is given.
    Write failures are logged and reported through the return value; they
    never raise into the session.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    @property
    def file_path(self) -> Path:
        return self._file_path

    def append(self, summary: SessionSummary) -> bool:
        """Add one session record. Returns False if it could not be written."""
        line = json.dumps(summary.to_dict(), ensure_ascii=False)
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with self._file_path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.warning("Could not save results to %s: %s", self._file_path, e)
            return False
        logger.info("Saved session results to %s", self._file_path)
        return True

    def load(self) -> List[Dict[str, Any]]:
        """All stored records, oldest first. Corrupt lines are skipped."""
        if not self._file_path.exists():
            return []
        try:
            lines = self._file_path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            logger.warning("Could not load results from %s: %s", self._file_path, e)
            return []

        records: List[Dict[str, Any]] = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning("Skipping corrupt line %d in %s: %s", number, self._file_path, e)
                continue
            if isinstance(record, dict):
                records.append(record)
        return records
