"""
Cooldown gate: admit or reject a submission based on the actor's last one.

The gate is a pure decision. It reads the actor's most recent qualifying
submission from the history provider it was built with, compares the
elapsed time against the policy interval, and on reject reports how long
the actor still has to wait.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from post_limit.policy import DAY_IN_SECONDS, HOUR_IN_SECONDS, Policy
from post_limit.providers import SubmissionHistoryProvider

logger = logging.getLogger(__name__)

MINUTE_IN_SECONDS = 60


@dataclass(frozen=True)
class GateDecision:
    admitted: bool
    retry_after: Optional[int] = None  # seconds
    message: Optional[str] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''}"


def format_wait(seconds: int) -> str:
    """
    Render a remaining wait as days, hours and minutes.

    Leftover seconds are dropped, so anything under a minute renders as "".

    >>> format_wait(90061)
    '1 day 1 hour 1 minute'
    """
    days, remainder = divmod(max(int(seconds), 0), DAY_IN_SECONDS)
    hours, remainder = divmod(remainder, HOUR_IN_SECONDS)
    minutes = remainder // MINUTE_IN_SECONDS

    parts = []
    if days > 0:
        parts.append(_plural(days, "day"))
    if hours > 0:
        parts.append(_plural(hours, "hour"))
    if minutes > 0:
        parts.append(_plural(minutes, "minute"))
    return " ".join(parts).strip()


class CooldownGate:
    """Decides whether an actor may submit again under a policy."""

    def __init__(self, history: SubmissionHistoryProvider):
        self.history = history

    def evaluate(self, actor_id: int, policy: Policy,
                 now: Optional[datetime] = None) -> GateDecision:
        """
        Evaluate one submission attempt.

        Args:
            actor_id: Authenticated actor making the submission
            policy: Resolved cooldown policy for the form
            now: Current instant (defaults to UTC now; naive values are UTC)

        Returns:
            GateDecision. Rejections carry retry_after (seconds) and the wait
            message. Errors from the history provider are not caught.
        """
        if not policy.enabled:
            return GateDecision(admitted=True)

        last = self.history.last_submission_instant(actor_id)
        if last is None:
            logger.debug("Actor %s has no prior submissions", actor_id)
        return self.decide(actor_id, policy, last, now=now)

    def decide(self, actor_id: int, policy: Policy, last: Optional[datetime],
               now: Optional[datetime] = None) -> GateDecision:
        """Decide against an already looked-up last submission instant."""
        if not policy.enabled or last is None:
            return GateDecision(admitted=True)

        interval = policy.interval_seconds
        if interval <= 0:
            logger.warning(
                "Time limit enabled with a zero interval (value=%r, unit=%r); not gating",
                policy.value, policy.unit,
            )
            return GateDecision(admitted=True)

        now = _as_utc(now) if now is not None else _utcnow()
        # A scheduled post can sit in the future; it counts as "just now".
        elapsed = max(int((now - _as_utc(last)).total_seconds()), 0)

        if elapsed >= interval:
            return GateDecision(admitted=True)

        retry_after = interval - elapsed
        logger.info(
            "Actor %s blocked by time limit: %ss elapsed of %ss",
            actor_id, elapsed, interval,
        )
        return GateDecision(
            admitted=False,
            retry_after=retry_after,
            message=format_wait(retry_after),
        )


def cooldown_status(actor_id: int, policy: Policy, history: SubmissionHistoryProvider,
                    now: Optional[datetime] = None) -> Dict[str, Any]:
    """Report an actor's cooldown state under a policy without gating anything."""
    now = _as_utc(now) if now is not None else _utcnow()
    last = history.last_submission_instant(actor_id) if policy.enabled else None
    decision = CooldownGate(history).decide(actor_id, policy, last, now=now)

    status = {
        "enabled": policy.enabled,
        "interval_seconds": policy.interval_seconds,
        "available": decision.admitted,
        "seconds_remaining": decision.retry_after or 0,
        "wait": decision.message or "",
    }
    if policy.enabled:
        status["last_submission"] = last.isoformat() if last else None
    return status
