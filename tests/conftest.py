import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

ROOT = Path(__file__).resolve().parents[1]
HERE = Path(__file__).resolve().parent
for path in (ROOT, HERE):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from fakes import FakeGenerator, FakeSpeaker
from interview_session import InterviewEngine
from storage.session_store import InMemorySessionStore


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def speaker():
    return FakeSpeaker()


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def engine(generator, speaker, store):
    return InterviewEngine(generator, speaker, store)


@pytest.fixture
def no_sleep():
    delays = []
    return delays, delays.append
