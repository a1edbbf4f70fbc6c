"""Pytest configuration and shared fixtures."""
import pytest

from tasks_generator.event_log import EventLogger
from tasks_generator.models import GeneratorInput, TemplateType
from tasks_generator.store import BacklogStore


@pytest.fixture
def data_dir(tmp_path):
    """Provide an empty data directory for a store."""
    return tmp_path / "data"


@pytest.fixture
def store(data_dir):
    """A BacklogStore writing under a temporary directory."""
    return BacklogStore(data_dir, event_logger=EventLogger(data_dir))


@pytest.fixture
def make_input():
    """Build a GeneratorInput with sensible defaults."""
    def _make(**overrides):
        fields = {
            "spec_id": "spec-1",
            "goal": "Track student attendance",
            "users": "students, teachers and admins",
            "constraints": "",
            "template_type": TemplateType.WEB,
        }
        fields.update(overrides)
        return GeneratorInput(**fields)
    return _make
