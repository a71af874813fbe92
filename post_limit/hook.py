"""
Pre-submission hook for the host's form pipeline.

The host calls before_form_process() before it processes a form
submission. A return of None means carry on; a dict means stop and hand the
status and message back to the submitter.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import parse_qs

from post_limit.config import LimitConfig, load_config
from post_limit.gate import CooldownGate
from post_limit.policy import resolve_policy
from post_limit.providers import FormConfigProvider, SubmissionHistoryProvider

logger = logging.getLogger(__name__)

RATE_LIMITED_STATUS = 403
GATED_FORM_TYPE = "login_require"
REJECT_MESSAGE = "You can submit a new post again after {wait}."


def _form_alias(form_data: Union[str, Mapping[str, Any]]) -> str:
    if isinstance(form_data, str):
        values = parse_qs(form_data, keep_blank_values=True).get("form_alias", [""])
        alias = values[-1]
    else:
        alias = form_data.get("form_alias") or ""
        if isinstance(alias, (list, tuple)):
            alias = alias[-1] if alias else ""
    return str(alias).strip()


def before_form_process(
    form_data: Union[str, Mapping[str, Any]],
    actor_id: Optional[int],
    forms: FormConfigProvider,
    history: SubmissionHistoryProvider,
    now: Optional[datetime] = None,
    config: Optional[LimitConfig] = None,
) -> Optional[Dict[str, Any]]:
    """
    Apply the form's time limit to a pending submission.

    Args:
        form_data: Url-encoded form payload (or parsed mapping) with form_alias
        actor_id: Logged-in user ID, None for anonymous submitters
        forms: Form config provider
        history: Submission history provider
        now: Current instant (defaults to UTC now)
        config: Loaded configuration (loaded on demand)

    Returns:
        None to continue processing, or
        {"status": 403, "message": "...", "blocked_by": "time_limit", "retry_after": N}
    """
    alias = _form_alias(form_data)
    if not alias:
        return None

    form = forms.lookup_form_by_alias(alias)
    if form is None:
        logger.warning("No form found for alias %r; skipping time limit", alias)
        return None

    if form.form_type != GATED_FORM_TYPE or actor_id is None:
        return None

    policy = resolve_policy(form.config_blob)
    if not policy.enabled:
        return None

    decision = CooldownGate(history).evaluate(actor_id, policy, now=now)
    if decision.admitted:
        return None

    config = config or load_config()
    wait = decision.message or config.under_minute_phrase
    return {
        "status": RATE_LIMITED_STATUS,
        "message": REJECT_MESSAGE.format(wait=wait),
        "blocked_by": "time_limit",
        "retry_after": decision.retry_after,
    }
