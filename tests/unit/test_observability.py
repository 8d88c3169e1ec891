import json
import logging

import pytest

from observability import configure_event_logging, log_event, span
from observability.logger import HumanEventFormatter, JsonEventFormatter


class _Collect(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def events():
    logger = configure_event_logging()
    handler = _Collect()
    logger.addHandler(handler)
    yield handler.records
    logger.removeHandler(handler)


def test_log_event_renders_human_and_json(events):
    log_event("answer_evaluated", "s-1", score=8.0, intent="deepen", ignored_on_console="x")
    record = events[-1]
    assert record.levelno == logging.INFO

    human = HumanEventFormatter().format(record)
    assert human.endswith("session=s-1 kind=answer_evaluated score=8.0 intent=deepen")

    payload = json.loads(JsonEventFormatter().format(record))
    assert payload["kind"] == "answer_evaluated"
    assert payload["ignored_on_console"] == "x"
    assert payload["level"] == "INFO"


def test_log_event_level(events):
    log_event("synthesis_degraded", "s-1", log_level=logging.WARNING, error="down")
    assert events[-1].levelno == logging.WARNING


def test_span_records_outcome(events):
    with span("s-1", "answer"):
        pass
    with pytest.raises(RuntimeError):
        with span("s-1", "end"):
            raise RuntimeError("boom")
    outcomes = [(r.event["phase"], r.event["outcome"]) for r in events if r.event["kind"] == "span"]
    assert outcomes == [("answer", "ok"), ("end", "error")]
