"""Tests for the Loguru helpers."""

import pytest

from pr_size_labeler.logger import _format_record, get_logger, log_success, log_timing, log_with_context


@pytest.fixture
def captured():
    messages = []
    sink_id = get_logger().add(messages.append, level="DEBUG", format=_format_record, colorize=False)
    yield messages
    get_logger().remove(sink_id)


def test_bound_fields_are_rendered(captured):
    log_with_context(get_logger(), delivery_id="d1", repository="acme/widget", pull_number=7).info("Sizing")

    assert len(captured) == 1
    assert captured[0].rstrip("\n").endswith("Sizing [delivery_id=d1 repository=acme/widget pull_number=7]")


def test_unbound_fields_leave_no_suffix(captured):
    log_with_context(get_logger(), delivery_id=None).info("Plain")

    assert captured[0].rstrip("\n").endswith("- Plain")


def test_success_carries_context(captured):
    log_success(get_logger(), "Labeled", event_type="pull_request")

    assert "=== SUCCESS: Labeled === [event_type=pull_request]" in captured[0]


def test_timing_logs_a_single_error_and_reraises(captured):
    with pytest.raises(ValueError):
        with log_timing(log_with_context(get_logger(), pull_number=3), "count"):
            raise ValueError("boom")

    errors = [message for message in captured if message.record["level"].name == "ERROR"]
    assert len(errors) == 1
    assert "Failed count after" in errors[0]
    assert errors[0].record["extra"]["pull_number"] == 3
