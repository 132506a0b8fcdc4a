from __future__ import annotations

import logging

import pytest

from ridematch.logs import LogSink


def test_entries_are_kept_in_order_until_cleared() -> None:
    sink = LogSink()
    sink.record("first")
    sink.record("second")

    assert sink.to_list() == ["first", "second"]
    assert list(sink) == ["first", "second"]
    sink.clear()
    assert len(sink) == 0


def test_bounded_sink_drops_oldest_entries() -> None:
    sink = LogSink(max_entries=2)
    for message in ("a", "b", "c"):
        sink.record(message)

    assert sink.to_list() == ["b", "c"]


def test_entries_are_mirrored_to_logger(caplog: pytest.LogCaptureFixture) -> None:
    sink = LogSink(logging.getLogger("ridematch.test"))
    with caplog.at_level(logging.DEBUG, logger="ridematch.test"):
        sink.record("Processing node 3 with distance 1.00")

    assert "Processing node 3 with distance 1.00" in caplog.messages
