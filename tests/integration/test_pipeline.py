from dataclasses import replace
from datetime import date

from core.exceptions import CompositionError, DeliveryError, HistoryError
from core.history import HistoryStore
from core.models.result import Failure, GenerationFailure, Success
from core.pipeline import DailyLessonRun
from core.scheduling import plan_lesson
from core.tracks import Track
from fakes import FakeEmailSender

LESSON_DATE = date(2025, 3, 4)

CLOUD = Track(name="Cloud & DevOps", subtopics=("GitOps",), queries=("devops",), feeds=())
SOFTWARE = Track(name="Software Engineering", subtopics=("Testing",), queries=("testing",), feeds=())


class StubOrchestrator:
    """Returns a prepared result per track name and records the plans it was asked for."""

    def __init__(self, results):
        self.results = results
        self.calls = []

    def generate(self, track, subtopic, level, lesson_date):
        self.calls.append((track.name, subtopic, level, lesson_date))
        return self.results[track.name]


class BrokenHistory:
    def append(self, lesson):
        raise HistoryError("append", "/nowhere/history.csv", PermissionError("read-only"))


def failure_for(track):
    return GenerationFailure(
        track=track.name,
        primary=Failure(CompositionError("openai", "gpt-4o-mini", TimeoutError("slow")), stage="composition"),
        fallback=Failure(CompositionError("openai", "gpt-4o-mini", TimeoutError("still slow")), stage="composition"),
    )


def test_successful_run_records_and_emails(tmp_path, sample_lesson, fake_notifier, fake_email_sender):
    """Test a successful run records, emails and summarizes."""
    history = HistoryStore(str(tmp_path / "history.csv"))
    orchestrator = StubOrchestrator({"Cloud & DevOps": Success(replace(sample_lesson, track="Cloud & DevOps"))})
    run = DailyLessonRun(orchestrator, history, email_sender=fake_email_sender, notifier=fake_notifier)

    record = run.run([CLOUD], lesson_date=LESSON_DATE)

    assert record.success
    assert record.lessons_generated == 1
    assert record.outcomes[0].emailed is True
    assert [l.track for l in history.read_all()] == ["Cloud & DevOps"]
    assert len(fake_email_sender.sent) == 1
    assert fake_notifier.summaries == [record]
    assert fake_notifier.failure_reports == []


def test_tracks_use_the_days_plan(tmp_path, sample_lesson):
    """Test each track is generated with the day's plan."""
    orchestrator = StubOrchestrator({"Cloud & DevOps": Success(sample_lesson)})
    run = DailyLessonRun(orchestrator, HistoryStore(str(tmp_path / "history.csv")))

    run.run([CLOUD], lesson_date=LESSON_DATE)

    plan = plan_lesson(CLOUD, LESSON_DATE)
    assert orchestrator.calls == [("Cloud & DevOps", plan.subtopic, plan.level, LESSON_DATE)]


def test_failed_track_is_reported_and_run_continues(tmp_path, sample_lesson, fake_notifier, fake_email_sender):
    """Test a failed track is reported and the run continues."""
    failure = failure_for(CLOUD)
    orchestrator = StubOrchestrator({
        "Cloud & DevOps": failure,
        "Software Engineering": Success(replace(sample_lesson, track="Software Engineering")),
    })
    history = HistoryStore(str(tmp_path / "history.csv"))
    run = DailyLessonRun(orchestrator, history, email_sender=fake_email_sender, notifier=fake_notifier)

    record = run.run([CLOUD, SOFTWARE], lesson_date=LESSON_DATE)

    assert not record.success
    assert record.failures == 1
    assert record.lessons_generated == 1
    assert fake_notifier.failure_reports == [failure]
    assert "primary:" in record.outcomes[0].error_message
    assert [l.track for l in history.read_all()] == ["Software Engineering"]
    assert len(fake_email_sender.sent) == 1


def test_dry_run_has_no_side_effects(tmp_path, sample_lesson, fake_notifier, fake_email_sender):
    """Test dry run skips history, email and Slack."""
    orchestrator = StubOrchestrator({"Cloud & DevOps": Success(sample_lesson), "Software Engineering": failure_for(SOFTWARE)})
    history = HistoryStore(str(tmp_path / "history.csv"))
    seen = []
    run = DailyLessonRun(orchestrator, history, email_sender=fake_email_sender, notifier=fake_notifier)

    record = run.run([CLOUD, SOFTWARE], lesson_date=LESSON_DATE, dry_run=True, on_lesson=seen.append)

    assert seen == [sample_lesson]
    assert record.lessons_generated == 1
    assert history.read_all() == []
    assert fake_email_sender.sent == []
    assert fake_notifier.failure_reports == []
    assert fake_notifier.summaries == []


def test_no_email_flag_skips_delivery(tmp_path, sample_lesson, fake_email_sender):
    """Test send_email=False skips delivery."""
    orchestrator = StubOrchestrator({"Cloud & DevOps": Success(sample_lesson)})
    run = DailyLessonRun(orchestrator, HistoryStore(str(tmp_path / "history.csv")), email_sender=fake_email_sender)

    record = run.run([CLOUD], lesson_date=LESSON_DATE, send_email=False)

    assert record.outcomes[0].emailed is False
    assert fake_email_sender.sent == []


def test_email_failure_keeps_lesson_and_warns_operator(tmp_path, sample_lesson, fake_notifier):
    """Test an email failure keeps the lesson and warns Slack."""
    sender = FakeEmailSender(error=DeliveryError("email", ConnectionRefusedError("smtp down")))
    history = HistoryStore(str(tmp_path / "history.csv"))
    run = DailyLessonRun(StubOrchestrator({"Cloud & DevOps": Success(sample_lesson)}), history,
                         email_sender=sender, notifier=fake_notifier)

    record = run.run([CLOUD], lesson_date=LESSON_DATE)

    outcome = record.outcomes[0]
    assert outcome.success is True
    assert outcome.emailed is False
    assert "Delivery via email failed" in outcome.error_message
    assert len(history.read_all()) == 1
    assert "Cloud & DevOps" in fake_notifier.messages[0]


def test_history_failure_does_not_block_email(sample_lesson, fake_email_sender):
    """Test a history failure still sends the email."""
    run = DailyLessonRun(StubOrchestrator({"Cloud & DevOps": Success(sample_lesson)}), BrokenHistory(),
                         email_sender=fake_email_sender)

    record = run.run([CLOUD], lesson_date=LESSON_DATE)

    assert record.outcomes[0].emailed is True
    assert "History append failed" in record.outcomes[0].error_message


def test_run_record_serializes(tmp_path, sample_lesson):
    """Test the run record dictionary."""
    run = DailyLessonRun(StubOrchestrator({"Cloud & DevOps": Success(sample_lesson)}),
                         HistoryStore(str(tmp_path / "history.csv")))

    data = run.run([CLOUD], lesson_date=LESSON_DATE, command_used="lesson generate --track cloud-devops").to_dict()

    assert data["lessons_generated"] == 1
    assert data["command_used"] == "lesson generate --track cloud-devops"
    assert data["outcomes"][0]["title"] == sample_lesson.title
    assert len(data["run_id"]) == 12
