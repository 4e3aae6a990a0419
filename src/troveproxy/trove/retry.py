"""Retry policy — a pure decision function for the upstream attempt loop.

The client loop performs the I/O and the sleeping; this module only decides
what happens after each attempt, which keeps the policy testable without
real delays::

    outcome = AttemptOutcome.from_status(503)
    decision = decide(outcome, attempt=1, policy=RetryPolicy())
    assert decision.state is AttemptState.RETRY
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

TRANSIENT_STATUS = 503


class AttemptState(str, Enum):
    """Where the loop goes after an attempt."""

    SUCCEEDED = "succeeded"
    RETRY = "retry"
    FAILED_PERMANENT = "failed_permanent"
    EXHAUSTED = "exhausted"


class RetryPolicy(BaseModel):
    """Bounded retry with a constant back-off."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    delay: float = Field(default=3.0, ge=0)


class AttemptOutcome(BaseModel):
    """What a single attempt produced: an HTTP status, or a network error."""

    model_config = ConfigDict(frozen=True)

    status: int | None = None
    error: str | None = None

    @classmethod
    def from_status(cls, status: int) -> AttemptOutcome:
        return cls(status=status)

    @classmethod
    def from_exception(cls, exc: BaseException) -> AttemptOutcome:
        return cls(error=str(exc) or type(exc).__name__)

    @property
    def ok(self) -> bool:
        return self.status is not None and 200 <= self.status < 300

    @property
    def network_failure(self) -> bool:
        return self.status is None


class Decision(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: AttemptState
    wait: float = 0.0


def decide(outcome: AttemptOutcome, attempt: int, policy: RetryPolicy) -> Decision:
    """Decide the next state after ``attempt`` (1-based) produced ``outcome``.

    - 2xx stops with success.
    - 503 or a network failure retries after ``policy.delay`` unless this was
      the last attempt, in which case the loop is exhausted.
    - Any other status stops immediately as a permanent failure.
    """
    if outcome.ok:
        return Decision(state=AttemptState.SUCCEEDED)

    is_last = attempt >= policy.max_attempts
    transient = outcome.network_failure or outcome.status == TRANSIENT_STATUS

    if not transient:
        return Decision(state=AttemptState.FAILED_PERMANENT)
    if is_last:
        return Decision(state=AttemptState.EXHAUSTED)
    return Decision(state=AttemptState.RETRY, wait=policy.delay)
