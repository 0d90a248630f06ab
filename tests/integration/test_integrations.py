import smtplib
from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest
import requests

from core.exceptions import CompositionError, DeliveryError
from core.models.metrics import RunRecord, TrackOutcome
from core.models.result import Failure, GenerationFailure
from integrations.email_sender import EmailSender
from integrations.openai_client import OpenAIClient
from integrations.slack_notifier import SlackNotifier


# --- slack ---------------------------------------------------------------

class PostRecorder:
    def __init__(self, status_code=200, error=None):
        self.status_code = status_code
        self.error = error
        self.payloads = []

    def __call__(self, url, json=None, timeout=None, headers=None):
        self.payloads.append(json)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(status_code=self.status_code, text="ok" if self.status_code == 200 else "invalid_payload")


@pytest.fixture
def slack_post(monkeypatch):
    recorder = PostRecorder()
    monkeypatch.setattr("integrations.slack_notifier.requests.post", recorder)
    return recorder


def test_slack_requires_webhook():
    """Test Slack notifier needs a webhook URL."""
    with pytest.raises(ValueError):
        SlackNotifier("")


def test_failure_report_includes_both_causes(slack_post):
    """Test the failure report shows both tier causes."""
    failure = GenerationFailure(
        track="Cloud & DevOps",
        primary=Failure(CompositionError("openai", "gpt-4o-mini", TimeoutError("slow")), stage="composition"),
        fallback=Failure(ValueError("bad json"), stage="validation"),
    )

    assert SlackNotifier("https://hooks.example.com/x").send_failure_report(failure, date(2025, 3, 4))

    payload = slack_post.payloads[0]
    rendered = str(payload["blocks"])
    assert "Cloud & DevOps" in payload["text"]
    assert "2025-03-04" in payload["text"]
    assert "slow" in rendered
    assert "bad json" in rendered


def test_run_summary_lists_every_track(slack_post):
    """Test the run summary has a line per track."""
    record = RunRecord(run_id="abc", timestamp=datetime(2025, 3, 4, 6, 0, tzinfo=timezone.utc), command_used="lesson generate")
    record.outcomes.extend([
        TrackOutcome(track="Cloud & DevOps", success=True, title="GitOps 101", used_fallback=True, emailed=True),
        TrackOutcome(track="Software Engineering", success=False, error_message="primary: boom"),
    ])

    SlackNotifier("https://hooks.example.com/x").send_run_summary(record)

    text = slack_post.payloads[0]["text"]
    assert "GitOps 101 (curated, emailed)" in text
    assert ":x: Software Engineering: primary: boom" in text


def test_long_messages_are_truncated(slack_post):
    """Test long Slack messages are truncated."""
    SlackNotifier("https://hooks.example.com/x").send_message("x" * 5000)

    assert len(slack_post.payloads[0]["text"]) == 4000


def test_webhook_errors_return_false(monkeypatch):
    """Test webhook errors return False instead of raising."""
    monkeypatch.setattr("integrations.slack_notifier.requests.post",
                        PostRecorder(error=requests.ConnectionError("no route")))
    assert SlackNotifier("https://hooks.example.com/x").send_message("hi") is False

    monkeypatch.setattr("integrations.slack_notifier.requests.post", PostRecorder(status_code=400))
    assert SlackNotifier("https://hooks.example.com/x").send_message("hi") is False


# --- email ---------------------------------------------------------------

class FakeSMTP:
    instances = []

    def __init__(self, host, port, context=None, fail_with=None):
        self.host = host
        self.port = port
        self.context = context
        self.fail_with = fail_with
        self.logins = []
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def login(self, username, password):
        if self.fail_with is not None:
            raise self.fail_with
        self.logins.append((username, password))

    def sendmail(self, sender, recipients, message):
        self.messages.append((sender, recipients, message))


def make_sender(smtp_factory):
    return EmailSender("smtp.example.com", 465, "me@example.com", "app-password", None, "learner@example.com",
                       smtp_factory=smtp_factory)


def test_email_requires_credentials():
    """Test email sender needs credentials."""
    with pytest.raises(ValueError):
        EmailSender("smtp.example.com", 465, "", "", None, "learner@example.com")


def test_email_message_has_text_and_html_parts(sample_lesson):
    """Test the email has plain-text and HTML parts."""
    msg = make_sender(FakeSMTP).build_message(sample_lesson)

    assert msg["Subject"].startswith("[Data Science & ML]")
    assert msg["To"] == "learner@example.com"
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


def test_send_lesson_logs_in_and_sends(sample_lesson):
    """Test sending a lesson over SMTP."""
    FakeSMTP.instances = []

    make_sender(FakeSMTP).send_lesson(sample_lesson)

    server = FakeSMTP.instances[0]
    assert (server.host, server.port) == ("smtp.example.com", 465)
    assert server.logins == [("me@example.com", "app-password")]
    sender, recipients, _ = server.messages[0]
    assert sender == "me@example.com"
    assert recipients == ["learner@example.com"]


def test_smtp_errors_become_delivery_errors(sample_lesson):
    """Test SMTP errors become DeliveryError."""
    def failing_factory(host, port, context=None):
        return FakeSMTP(host, port, context, fail_with=smtplib.SMTPAuthenticationError(535, b"bad credentials"))

    with pytest.raises(DeliveryError) as exc_info:
        make_sender(failing_factory).send_lesson(sample_lesson)

    assert exc_info.value.context["channel"] == "email"


# --- openai --------------------------------------------------------------

class StubCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.response


def stub_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def completion(content, finish_reason="stop"):
    return SimpleNamespace(
        choices=[SimpleNamespace(finish_reason=finish_reason, message=SimpleNamespace(content=content, refusal=None))],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=20, total_tokens=30),
    )


MESSAGES = [{"role": "system", "content": "teach"}, {"role": "user", "content": "lesson please"}]


def test_structured_request_uses_strict_json_schema():
    """Test the structured request uses a strict JSON schema."""
    completions = StubCompletions(completion('{"title": "t"}'))
    client = OpenAIClient("key", model="gpt-4o-mini", client=stub_client(completions))

    assert client.complete_structured(MESSAGES, {"type": "object"}, "lesson") == '{"title": "t"}'

    response_format = completions.kwargs["response_format"]
    assert response_format["type"] == "json_schema"
    assert response_format["json_schema"]["strict"] is True
    assert response_format["json_schema"]["name"] == "lesson_response"
    assert completions.kwargs["model"] == "gpt-4o-mini"


@pytest.mark.parametrize("completions", [
    StubCompletions(error=RuntimeError("rate limited")),
    StubCompletions(completion('{"title": "cut of', finish_reason="length")),
    StubCompletions(completion("")),
])
def test_unusable_completions_raise_composition_error(completions):
    """Test failed, truncated or empty completions raise CompositionError."""
    client = OpenAIClient("key", client=stub_client(completions))

    with pytest.raises(CompositionError):
        client.complete_structured(MESSAGES, {"type": "object"})


def test_connection_check_posts_a_test_message(slack_post):
    """Test the Slack connection check posts a message."""
    assert SlackNotifier("https://hooks.example.com/x").test_connection() is True
    assert slack_post.payloads[0]["icon_emoji"] == ":test_tube:"
