import json
import logging

from roblox_visits import obs


def test_log_event_json_line(caplog):
    caplog.set_level(logging.INFO, logger="obs")
    rid = obs.new_request_id()

    obs.log_event("visits.total", user_id="1", total_visits=5, skipped=None)

    record = caplog.records[-1]
    assert record.levelno == logging.INFO
    payload = json.loads(record.getMessage())
    assert payload["event"] == "visits.total"
    assert payload["rid"] == rid
    assert payload["total_visits"] == 5
    assert "skipped" not in payload


def test_log_event_levels(caplog):
    caplog.set_level(logging.INFO, logger="obs")

    obs.log_event("visits.groups_failed", level="warning")
    obs.log_event("visits.fatal", level="error")

    assert [r.levelno for r in caplog.records[-2:]] == [logging.WARNING, logging.ERROR]
