"""Best-effort audit trail for risk decisions.

Recording never interferes with the decision itself: :func:`record_decision`
logs and swallows any recorder failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
import json
import logging
from pathlib import Path
from typing import Any, Protocol

from .core.models import Decision

logger = logging.getLogger(__name__)

RISK_ASSESSMENT_ACTION = "RISK_ASSESSMENT"


@dataclass(frozen=True)
class DecisionRecord:
    pool_id: str
    decision: Decision
    original_capital: Decimal
    final_capital: Decimal | None
    reason: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "pool_id": self.pool_id,
            "action": RISK_ASSESSMENT_ACTION,
            "details": {
                "decision": self.decision.value,
                "original_capital": str(self.original_capital),
                "final_capital": (
                    str(self.final_capital) if self.final_capital is not None else None
                ),
                "reason": self.reason,
                "timestamp": self.timestamp.isoformat(),
            },
        }


class DecisionRecorder(Protocol):
    """Sink accepting decision records; implementations may raise freely."""

    def record(self, record: DecisionRecord) -> None: ...


class JsonlDecisionRecorder:
    """Append one JSON object per decision to ``path``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def record(self, record: DecisionRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record.to_dict()) + "\n")


class LoggingDecisionRecorder:
    """Emit decisions through :mod:`logging` instead of a file."""

    def __init__(self, level: int = logging.INFO) -> None:
        self.level = level

    def record(self, record: DecisionRecord) -> None:
        details = record.to_dict()["details"]
        logger.log(
            self.level,
            "Risk decision for %s: %s (%s -> %s) %s",
            record.pool_id,
            details["decision"],
            details["original_capital"],
            details["final_capital"],
            details["reason"],
        )


def record_decision(
    recorder: DecisionRecorder | None,
    pool_id: str,
    decision: Decision,
    original_capital: Decimal,
    final_capital: Decimal | None,
    reason: str,
) -> bool:
    """Hand a decision to ``recorder``; returns ``False`` if it was not stored."""

    if recorder is None:
        return False
    record = DecisionRecord(pool_id, decision, original_capital, final_capital, reason)
    try:
        recorder.record(record)
    except Exception as exc:
        logger.warning("Failed to log risk decision for %s: %s", pool_id, exc)
        return False
    return True


__all__ = [
    "DecisionRecord",
    "DecisionRecorder",
    "JsonlDecisionRecorder",
    "LoggingDecisionRecorder",
    "record_decision",
]
