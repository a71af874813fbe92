"""
Tests for the cooldown gate and wait-message formatting.

Uses a stub history provider so every case controls the actor's last
submission instant exactly.
"""
from datetime import datetime, timezone, timedelta
from unittest.mock import MagicMock

import pytest

from post_limit.gate import CooldownGate, GateDecision, cooldown_status, format_wait
from post_limit.policy import Policy


NOW = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
DAY_POLICY = Policy(enabled=True, value=1, unit="days")


class _History:
    """Submission history stub returning a fixed instant."""

    def __init__(self, last=None):
        self.last = last
        self.calls = []

    def last_submission_instant(self, actor_id):
        self.calls.append(actor_id)
        return self.last


def _evaluate(last, policy=DAY_POLICY, now=NOW):
    return CooldownGate(_History(last)).evaluate(7, policy, now=now)


class TestFormatWait:
    """Remaining-time decomposition into days, hours, minutes."""

    def test_all_components(self):
        assert format_wait(90061) == "1 day 1 hour 1 minute"

    def test_plurals(self):
        assert format_wait(2 * 86400 + 3 * 3600 + 5 * 60) == "2 days 3 hours 5 minutes"

    def test_skips_zero_components(self):
        assert format_wait(86400 + 120) == "1 day 2 minutes"
        assert format_wait(3 * 3600) == "3 hours"

    def test_seconds_dropped(self):
        assert format_wait(119) == "1 minute"

    def test_under_a_minute_is_empty(self):
        assert format_wait(45) == ""
        assert format_wait(0) == ""


class TestCooldownGate:
    """Admit/reject decisions."""

    def test_disabled_policy_always_admits(self):
        history = _History(NOW - timedelta(seconds=1))
        policy = Policy(enabled=False, value=1, unit="weeks")
        decision = CooldownGate(history).evaluate(7, policy, now=NOW)
        assert decision == GateDecision(admitted=True)
        assert history.calls == []

    def test_no_history_admits(self):
        assert _evaluate(None).admitted is True

    def test_boundary_is_inclusive(self):
        decision = _evaluate(NOW - timedelta(seconds=86400))
        assert decision.admitted is True

    def test_one_second_short_rejects(self):
        decision = _evaluate(NOW - timedelta(seconds=86399))
        assert decision.admitted is False
        assert decision.retry_after == 1
        assert decision.message == ""

    def test_reject_message(self):
        policy = Policy(enabled=True, value=2, unit="days")
        # 2 days minus (1 day 1 hour 1 minute 1 second) have elapsed
        last = NOW - timedelta(seconds=2 * 86400 - 90061)
        decision = _evaluate(last, policy=policy)
        assert decision.admitted is False
        assert decision.retry_after == 90061
        assert decision.message == "1 day 1 hour 1 minute"

    def test_unknown_unit_never_rejects(self):
        policy = Policy(enabled=True, value=3, unit="centuries")
        assert _evaluate(NOW, policy=policy).admitted is True

    def test_zero_value_never_rejects(self):
        policy = Policy(enabled=True, value=0, unit="days")
        assert _evaluate(NOW, policy=policy).admitted is True

    def test_future_submission_counts_as_now(self):
        decision = _evaluate(NOW + timedelta(hours=5))
        assert decision.admitted is False
        assert decision.retry_after == 86400
        assert decision.message == "1 day"

    def test_naive_now_is_utc(self):
        decision = _evaluate(NOW - timedelta(hours=23), now=NOW.replace(tzinfo=None))
        assert decision.retry_after == 3600

    def test_history_in_other_offset(self):
        plus_two = timezone(timedelta(hours=2))
        last = (NOW - timedelta(hours=1)).astimezone(plus_two)
        decision = _evaluate(last)
        assert decision.retry_after == 23 * 3600
        assert decision.message == "23 hours"

    def test_month_policy(self):
        policy = Policy(enabled=True, value=1, unit="months")
        decision = _evaluate(NOW - timedelta(days=29), policy=policy)
        assert decision.admitted is False
        assert decision.message == "1 day"

    def test_history_errors_propagate(self):
        history = MagicMock()
        history.last_submission_instant.side_effect = RuntimeError("store down")
        with pytest.raises(RuntimeError, match="store down"):
            CooldownGate(history).evaluate(7, DAY_POLICY, now=NOW)

    def test_defaults_now_to_current_time(self):
        last = datetime.now(timezone.utc) - timedelta(hours=2)
        decision = CooldownGate(_History(last)).evaluate(7, DAY_POLICY)
        assert decision.admitted is False
        assert 21 * 3600 < decision.retry_after <= 22 * 3600


class TestCooldownStatus:
    """Read-only status report."""

    def test_blocked_status(self):
        last = NOW - timedelta(hours=20)
        status = cooldown_status(7, DAY_POLICY, _History(last), now=NOW)
        assert status["enabled"] is True
        assert status["interval_seconds"] == 86400
        assert status["available"] is False
        assert status["seconds_remaining"] == 4 * 3600
        assert status["wait"] == "4 hours"
        assert status["last_submission"] == last.isoformat()

    def test_history_queried_once(self):
        history = _History(NOW - timedelta(hours=20))
        cooldown_status(7, DAY_POLICY, history, now=NOW)
        assert history.calls == [7]

    def test_decide_uses_given_instant(self):
        history = _History(NOW)
        decision = CooldownGate(history).decide(7, DAY_POLICY, NOW - timedelta(hours=23), now=NOW)
        assert decision.retry_after == 3600
        assert history.calls == []

    def test_available_without_history(self):
        status = cooldown_status(7, DAY_POLICY, _History(None), now=NOW)
        assert status["available"] is True
        assert status["seconds_remaining"] == 0
        assert status["last_submission"] is None

    def test_disabled_policy_skips_lookup(self):
        history = _History(NOW)
        status = cooldown_status(7, Policy(), history, now=NOW)
        assert status["available"] is True
        assert "last_submission" not in status
        assert history.calls == []
