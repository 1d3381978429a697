from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path

import pytest

from lp_risk_lab.core import Decision
from lp_risk_lab.decision_log import (
    DecisionRecord,
    JsonlDecisionRecorder,
    LoggingDecisionRecorder,
    record_decision,
)


class _FailingRecorder:
    def record(self, record: DecisionRecord) -> None:
        raise RuntimeError("sink unavailable")


def test_jsonl_recorder_appends_records(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "decisions.jsonl"
    recorder = JsonlDecisionRecorder(path)

    assert record_decision(recorder, "pool-a", Decision.ADJUSTED, Decimal("2000"), Decimal("1000"), "clamped")
    assert record_decision(recorder, "pool-b", Decision.REJECTED, Decimal("10"), None, "too small")

    lines = [json.loads(line) for line in path.read_text().splitlines()]
    assert [line["pool_id"] for line in lines] == ["pool-a", "pool-b"]
    assert lines[0]["action"] == "RISK_ASSESSMENT"
    assert lines[0]["details"]["final_capital"] == "1000"
    assert lines[1]["details"]["decision"] == "REJECTED"
    assert lines[1]["details"]["final_capital"] is None
    assert lines[1]["details"]["timestamp"].endswith("+00:00")


def test_failures_are_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="lp_risk_lab.decision_log"):
        stored = record_decision(
            _FailingRecorder(), "pool-a", Decision.APPROVED, Decimal("100"), Decimal("100"), "ok"
        )

    assert stored is False
    assert "Failed to log risk decision for pool-a" in caplog.text


def test_no_recorder_is_a_no_op() -> None:
    assert record_decision(None, "pool-a", Decision.APPROVED, Decimal("1"), Decimal("1"), "") is False


def test_logging_recorder_emits_decision(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="lp_risk_lab.decision_log"):
        record_decision(
            LoggingDecisionRecorder(), "pool-a", Decision.APPROVED, Decimal("5"), Decimal("5"), "fine"
        )
    assert "Risk decision for pool-a: APPROVED" in caplog.text
