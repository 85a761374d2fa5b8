import pytest

from tutorial_hub.db import TutorialStore


@pytest.fixture
def store(tmp_path):
    s = TutorialStore(tmp_path / "tutorials.db", timeout=1)
    s.init_schema()
    return s
