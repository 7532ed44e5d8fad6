"""Structured outcome of a release command."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    passed = "pass"
    failed = "fail"
    skipped = "skip"


@dataclass(frozen=True)
class Finding:
    entity: str
    outcome: Outcome
    reason: str


@dataclass
class ReleaseReport:
    """Accumulates (entity, outcome, reason) findings for one command.

    Findings are logged as they are recorded and returned to the caller, so a
    failing repository never hides the ones evaluated after it.
    """

    findings: list[Finding] = field(default_factory=list)

    def record(self, entity: str, outcome: Outcome, reason: str) -> Finding:
        finding = Finding(entity=entity, outcome=outcome, reason=reason)
        self.findings.append(finding)
        if outcome is Outcome.failed:
            logger.warning("[%s] %s: %s", outcome.value, entity, reason)
        else:
            logger.info("[%s] %s: %s", outcome.value, entity, reason)
        return finding

    def passed(self, entity: str, reason: str) -> Finding:
        return self.record(entity, Outcome.passed, reason)

    def failed(self, entity: str, reason: str) -> Finding:
        return self.record(entity, Outcome.failed, reason)

    def skipped(self, entity: str, reason: str) -> Finding:
        return self.record(entity, Outcome.skipped, reason)

    def extend(self, other: ReleaseReport) -> None:
        self.findings.extend(other.findings)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failures(self) -> list[Finding]:
        return [f for f in self.findings if f.outcome is Outcome.failed]

    def summary(self) -> dict[str, int]:
        counts = Counter(f.outcome.value for f in self.findings)
        return {o.value: counts.get(o.value, 0) for o in Outcome}

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "summary": self.summary(),
            "findings": [
                {"entity": f.entity, "outcome": f.outcome.value, "reason": f.reason} for f in self.findings
            ],
        }
