import logging

import pytest
import requests

from core.http_client import RetryingHttpClient
from fakes import FakeResponse, FakeSession


def test_success_on_first_attempt_does_not_sleep(http_factory, sleep_recorder):
    """Test a first-try success makes one call and no sleep."""
    client, session = http_factory([FakeResponse(200, {"ok": True})])

    response = client.get("https://api.example.com/items", params={"q": "x"})

    assert response.status_code == 200
    assert len(session.calls) == 1
    assert session.calls[0]["params"] == {"q": "x"}
    assert session.calls[0]["timeout"] == 15
    assert sleep_recorder.delays == []


def test_three_failures_return_none_after_exactly_three_attempts(http_factory, sleep_recorder):
    """Test exhausted retries return None after three attempts."""
    client, session = http_factory([FakeResponse(500)])

    response = client.get("https://api.example.com/items")

    assert response is None
    assert len(session.calls) == 3
    # base_delay * 2^attempt, no sleep after the final attempt
    assert sleep_recorder.delays == [1.0, 2.0]


def test_transport_errors_are_retried_and_never_raised(http_factory, sleep_recorder):
    """Test transport exceptions are retried, not raised."""
    client, session = http_factory([
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.Timeout("slow"),
        FakeResponse(204),
    ])

    response = client.get("https://api.example.com/items")

    assert response.status_code == 204
    assert len(session.calls) == 3
    assert sleep_recorder.delays == [1.0, 2.0]


def test_non_2xx_statuses_count_as_failures(http_factory):
    """Test that only 2xx responses count as success."""
    client, session = http_factory([FakeResponse(301), FakeResponse(429), FakeResponse(200, {})])

    response = client.get("https://api.example.com/items")

    assert response.status_code == 200
    assert len(session.calls) == 3


def test_failures_are_logged_with_attempt_number_and_cause(http_factory, caplog):
    """Test failure logging includes attempt and cause."""
    caplog.set_level(logging.WARNING, logger="core.http_client")
    client, _ = http_factory([FakeResponse(503)])

    client.get("https://api.example.com/items")

    assert "attempt 1/3" in caplog.text
    assert "attempt 3/3" in caplog.text
    assert "HTTP 503" in caplog.text
    assert "Giving up" in caplog.text


def test_backoff_is_exponential():
    """Test the exponential backoff schedule."""
    client = RetryingHttpClient(base_delay_ms=250, session=FakeSession(), sleep=lambda _: None)

    assert [client.backoff_seconds(n) for n in range(4)] == [0.25, 0.5, 1.0, 2.0]


@pytest.mark.parametrize("kwargs", [{"retries": 0}, {"base_delay_ms": -1}])
def test_invalid_policy_is_a_programming_error(kwargs):
    """Test invalid retry settings raise ValueError."""
    with pytest.raises(ValueError):
        RetryingHttpClient(session=FakeSession(), **kwargs)
