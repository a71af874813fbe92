"""
Cooldown policy resolution.

Turns a form's stored settings blob into a typed Policy. Resolution never
fails: anything missing or malformed yields a policy that does not gate.
"""
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Mapping

logger = logging.getLogger(__name__)

HOUR_IN_SECONDS = 3600
DAY_IN_SECONDS = 24 * HOUR_IN_SECONDS
WEEK_IN_SECONDS = 7 * DAY_IN_SECONDS

# Months are a flat 30 days, not calendar months.
UNIT_SECONDS = {
    "hours": HOUR_IN_SECONDS,
    "days": DAY_IN_SECONDS,
    "weeks": WEEK_IN_SECONDS,
    "months": 30 * DAY_IN_SECONDS,
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class Policy:
    """Minimum interval an actor must wait between submissions."""
    enabled: bool = False
    value: int = 0
    unit: str = ""

    @property
    def interval_seconds(self) -> int:
        return self.value * unit_seconds(self.unit)


def unit_seconds(unit: str) -> int:
    """Seconds per unit; 0 for anything unrecognized."""
    return UNIT_SECONDS.get(unit, 0)


def _is_set(value: Any) -> bool:
    """Emptiness check for stored form settings ("0" and "" count as unset)."""
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value not in ("", "0")
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) > 0
    return True


def _parse_int(value: Any) -> int:
    """Leading-integer parse; unparsable input gives 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # json.loads accepts NaN, Infinity and overflowing literals like 1e400
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return 0


def _as_mapping(form_details: Any) -> Mapping:
    if isinstance(form_details, (str, bytes)):
        try:
            form_details = json.loads(form_details)
        except ValueError:
            logger.debug("Form details are not valid JSON; treating as empty")
            return {}
    if isinstance(form_details, Mapping):
        return form_details
    return {}


def resolve_policy(form_details: Any) -> Policy:
    """
    Build a Policy from a form's settings blob.

    Args:
        form_details: Mapping (or its JSON text) with a "basic" section holding
            limit_post_time, time_limit_value and time_limit_unit.

    Returns:
        Policy. A non-positive value or unknown unit resolves to an interval
        of 0 seconds, which never gates.
    """
    basic = _as_mapping(form_details).get("basic")
    if not isinstance(basic, Mapping):
        return Policy()

    value = _parse_int(basic.get("time_limit_value"))
    unit = basic.get("time_limit_unit")

    return Policy(
        enabled=_is_set(basic.get("limit_post_time")),
        value=value if value > 0 else 0,
        unit=str(unit) if unit is not None else "",
    )
