"""Tests for the retry decision function."""

from __future__ import annotations

import httpx
import pytest

from troveproxy.trove.retry import AttemptOutcome, AttemptState, RetryPolicy, decide


@pytest.fixture
def policy() -> RetryPolicy:
    return RetryPolicy(max_attempts=3, delay=3.0)


class TestAttemptOutcome:
    def test_ok_for_2xx(self) -> None:
        assert AttemptOutcome.from_status(200).ok
        assert AttemptOutcome.from_status(204).ok
        assert not AttemptOutcome.from_status(503).ok

    def test_network_failure(self) -> None:
        outcome = AttemptOutcome.from_exception(httpx.ConnectError("connection refused"))
        assert outcome.network_failure
        assert not outcome.ok
        assert outcome.error == "connection refused"

    def test_exception_without_message_uses_type_name(self) -> None:
        outcome = AttemptOutcome.from_exception(httpx.ReadTimeout(""))
        assert outcome.error == "ReadTimeout"


class TestDecide:
    def test_success_stops(self, policy: RetryPolicy) -> None:
        decision = decide(AttemptOutcome.from_status(200), 1, policy)
        assert decision.state is AttemptState.SUCCEEDED
        assert decision.wait == 0.0

    @pytest.mark.parametrize("attempt", [1, 2])
    def test_503_retries_before_last_attempt(self, policy: RetryPolicy, attempt: int) -> None:
        decision = decide(AttemptOutcome.from_status(503), attempt, policy)
        assert decision.state is AttemptState.RETRY
        assert decision.wait == 3.0

    def test_503_on_last_attempt_exhausts(self, policy: RetryPolicy) -> None:
        decision = decide(AttemptOutcome.from_status(503), 3, policy)
        assert decision.state is AttemptState.EXHAUSTED

    def test_network_failure_retries(self, policy: RetryPolicy) -> None:
        outcome = AttemptOutcome(error="timed out")
        assert decide(outcome, 1, policy).state is AttemptState.RETRY
        assert decide(outcome, 3, policy).state is AttemptState.EXHAUSTED

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 429, 500, 502])
    def test_other_statuses_fail_immediately(self, policy: RetryPolicy, status: int) -> None:
        decision = decide(AttemptOutcome.from_status(status), 1, policy)
        assert decision.state is AttemptState.FAILED_PERMANENT

    def test_single_attempt_policy_never_retries(self) -> None:
        decision = decide(AttemptOutcome.from_status(503), 1, RetryPolicy(max_attempts=1))
        assert decision.state is AttemptState.EXHAUSTED

    def test_is_pure(self, policy: RetryPolicy) -> None:
        outcome = AttemptOutcome.from_status(503)
        assert decide(outcome, 2, policy) == decide(outcome, 2, policy)
