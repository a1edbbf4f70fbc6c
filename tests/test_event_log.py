"""Tests for the JSONL event log."""

import json

from tasks_generator.event_log import EventLogger
from tasks_generator.models import EventType


class TestEventLogger:
    def test_log_writes_json_lines(self, tmp_path):
        logger = EventLogger(tmp_path / "data")

        logger.log(EventType.SPEC_CREATED, spec_id="s1", task_count=3)
        logger.log(EventType.SPEC_DELETED, spec_id="s1")

        lines = logger.log_file.read_text().strip().split("\n")
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["type"] == "spec_created"
        assert first["task_count"] == 3
        assert "timestamp" in first

    def test_disabled_logger_writes_nothing(self, tmp_path):
        logger = EventLogger(tmp_path, enabled=False)

        logger.log(EventType.SPEC_CREATED, spec_id="s1")

        assert not logger.log_file.exists()

    def test_read_events_filters(self, tmp_path):
        logger = EventLogger(tmp_path)
        logger.log(EventType.SPEC_CREATED, spec_id="a")
        logger.log(EventType.TASKS_GROUPED, spec_id="a", group_name="MVP")
        logger.log(EventType.SPEC_CREATED, spec_id="b")

        assert [e["spec_id"] for e in logger.read_events(event_type=EventType.SPEC_CREATED)] == ["a", "b"]
        assert [e["type"] for e in logger.read_events(spec_id="a")] == ["spec_created", "tasks_grouped"]

    def test_read_events_skips_malformed_lines(self, tmp_path):
        logger = EventLogger(tmp_path)
        logger.log(EventType.SPEC_CREATED, spec_id="a")
        with open(logger.log_file, "a", encoding="utf-8") as handle:
            handle.write("not json\n\n")

        assert len(list(logger.read_events())) == 1

    def test_read_events_missing_file(self, tmp_path):
        assert list(EventLogger(tmp_path).read_events()) == []

    def test_tail(self, tmp_path):
        logger = EventLogger(tmp_path)
        for i in range(5):
            logger.log(EventType.TASK_UPDATED, task_id=str(i))

        assert [e["task_id"] for e in logger.tail(2)] == ["3", "4"]
        assert logger.tail(0) == []

    def test_tail_filters_by_spec(self, tmp_path):
        logger = EventLogger(tmp_path)
        logger.log(EventType.SPEC_CREATED, spec_id="a")
        logger.log(EventType.SPEC_CREATED, spec_id="b")
        logger.log(EventType.SPEC_DELETED, spec_id="a")

        assert [e["type"] for e in logger.tail(5, spec_id="a")] == ["spec_created", "spec_deleted"]
        assert logger.tail(-1, spec_id="a") == []

    def test_failed_write_returns_false(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        logger = EventLogger(blocker / "data")

        assert logger.log(EventType.ERROR, error="disk full") is False
        assert EventLogger(tmp_path).log(EventType.ERROR, error="disk full") is True
