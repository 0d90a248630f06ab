import json
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional, Union

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

# Also add the project root to handle absolute imports
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.cache import InMemoryCache  # noqa: E402
from core.config import reset_config  # noqa: E402
from core.container import reset_container  # noqa: E402
from core.http_client import RetryingHttpClient  # noqa: E402
from core.models.lesson import Lesson, LessonSection  # noqa: E402
from core.tracks import Track  # noqa: E402
from fakes import (  # noqa: E402
    FakeEmailSender, FakeNotifier, FakeResponse, FakeSession, ManualClock, SleepRecorder, lesson_payload,
)


@pytest.fixture(autouse=True)
def isolated_globals():
    yield
    reset_container()
    reset_config()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def http_factory(sleep_recorder):
    def _factory(outcomes: Optional[List[Union[FakeResponse, Exception]]] = None, retries: int = 3):
        session = FakeSession(outcomes)
        client = RetryingHttpClient(retries=retries, base_delay_ms=1000, session=session, sleep=sleep_recorder)
        return client, session

    return _factory


@pytest.fixture
def memory_cache(clock) -> InMemoryCache:
    return InMemoryCache(clock=clock)


@pytest.fixture
def data_science_track() -> Track:
    return Track(
        name="Data Science & ML",
        subtopics=("Feature engineering", "Model evaluation metrics", "Gradient boosting"),
        queries=("machine learning", "data science", "artificial intelligence"),
        feeds=("https://feeds.example.com/ml.xml", "https://feeds.example.com/ds.xml", "https://feeds.example.com/extra.xml"),
    )


@pytest.fixture
def sample_lesson() -> Lesson:
    return Lesson(
        date=date(2025, 3, 4),
        track="Data Science & ML",
        subtopic="Model evaluation metrics",
        level="Intermediate",
        title="Picking the Right Evaluation Metric",
        hook="Accuracy hides more than it shows.",
        sections=(
            LessonSection("Why accuracy misleads", "With 99% negatives a model that always says no scores 99%."),
            LessonSection("Precision & recall", "Precision asks <how many> alerts were right."),
        ),
        action_item="Compute precision and recall for your last model.",
        tags=("metrics", "evaluation"),
        word_count=42,
        used_fallback=False,
    )


@pytest.fixture
def lesson_json() -> str:
    return json.dumps(lesson_payload())


@pytest.fixture
def fake_notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def fake_email_sender() -> FakeEmailSender:
    return FakeEmailSender()
