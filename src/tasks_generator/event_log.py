"""Event logging for JSONL-based observability.

Records store mutations as one JSON object per line:
- Spec creation and deletion
- Task edits
- Reorder and group operations
- Storage errors

Entries are written with immediate flush (os.fsync) so the log can be tailed
while the API is running.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Optional

from .models import EventType


class EventLogger:
    """Append-only JSONL event log.

    Example output:
        {"type": "spec_created", "timestamp": "...", "spec_id": "...", "task_count": 23}
        {"type": "tasks_reordered", "timestamp": "...", "spec_id": "...", "task_count": 23}
        {"type": "tasks_grouped", "timestamp": "...", "group_name": "MVP", ...}
    """

    DEFAULT_FILENAME = "events.jsonl"

    def __init__(self, data_dir: Path | str, filename: str = DEFAULT_FILENAME, enabled: bool = True):
        """Initialize the event logger.

        Args:
            data_dir: Directory the log file lives in
            filename: Log file name
            enabled: When False, log() is a no-op
        """
        self.data_dir = Path(data_dir)
        self.log_file = self.data_dir / filename
        self.enabled = enabled

    def log(self, event_type: EventType, **fields: Any) -> bool:
        """Append an event with immediate flush.

        Write failures are reported through the return value, not raised.

        Args:
            event_type: Type of the event
            **fields: Extra JSON-serializable fields

        Returns:
            True if the entry was written, False if disabled or the write failed
        """
        if not self.enabled:
            return False

        entry = {"type": event_type.value, "timestamp": datetime.now().isoformat()}
        entry.update(fields)

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, "a", encoding="utf-8") as handle:
                handle.write(json.dumps(entry, default=str) + "\n")
                handle.flush()
                try:
                    os.fsync(handle.fileno())
                except OSError:
                    pass  # Some filesystems don't support fsync
        except OSError:
            return False
        return True

    def read_events(
        self,
        spec_id: Optional[str] = None,
        event_type: Optional[EventType] = None,
    ) -> Iterator[dict]:
        """Read events back, optionally filtered.

        Malformed lines are skipped.

        Args:
            spec_id: Only events for this spec
            event_type: Only events of this type

        Yields:
            Event dicts in file order
        """
        if not self.log_file.exists():
            return

        with open(self.log_file, encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if spec_id and entry.get("spec_id") != spec_id:
                    continue
                if event_type and entry.get("type") != event_type.value:
                    continue
                yield entry

    def tail(self, count: int = 20, spec_id: Optional[str] = None) -> list[dict]:
        """Return the last `count` events, optionally only those for one spec."""
        events = list(self.read_events(spec_id=spec_id))
        return events[-count:] if count > 0 else []
