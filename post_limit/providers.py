"""
Collaborators consumed by the time limit check.

The check never talks to storage directly. It is handed a form config
provider and a submission history provider; this module defines their
contracts and ships adapters for a SQLAlchemy-mapped host database and for
a host exposing a WordPress-style REST API.
"""
import logging
from datetime import datetime, timezone
from typing import Any, NamedTuple, Optional, Protocol
from zoneinfo import ZoneInfo

import requests
from sqlalchemy import desc

from post_limit.models import Form, Post

logger = logging.getLogger(__name__)

# Statuses that count as a submission: published, draft, pending review, scheduled.
QUALIFYING_STATUSES = ("publish", "draft", "pending", "future")


class FormRecord(NamedTuple):
    form_type: str
    config_blob: Any


class FormConfigProvider(Protocol):
    def lookup_form_by_alias(self, alias: str) -> Optional[FormRecord]:
        ...


class SubmissionHistoryProvider(Protocol):
    def last_submission_instant(self, actor_id: int) -> Optional[datetime]:
        """Most recent qualifying submission as an aware UTC datetime, or None."""
        ...


def to_utc(value: datetime, tz: str = "UTC") -> datetime:
    """Interpret a naive timestamp in ``tz`` and return it as aware UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo(tz))
    return value.astimezone(timezone.utc)


class SqlFormConfigProvider:
    """Form lookups against the host's forms table."""

    def __init__(self, session):
        self.session = session

    def lookup_form_by_alias(self, alias: str) -> Optional[FormRecord]:
        form = self.session.query(Form).filter(Form.alias == alias).first()
        if form is None:
            return None
        return FormRecord(form_type=form.form_type, config_blob=form.form_details)


class SqlSubmissionHistoryProvider:
    """
    Last-submission lookups against the host's posts table.

    Stored timestamps are naive and in ``store_timezone`` (the site's local
    zone on hosts that save local dates); they are converted to UTC before
    being handed to the gate.
    """

    def __init__(self, session, store_timezone: str = "UTC"):
        self.session = session
        self.store_timezone = store_timezone

    def last_submission_instant(self, actor_id: int) -> Optional[datetime]:
        latest = (
            self.session.query(Post)
            .filter(
                Post.author_id == actor_id,
                Post.status.in_(QUALIFYING_STATUSES),
            )
            .order_by(desc(Post.created_at))
            .first()
        )
        if latest is None or latest.created_at is None:
            return None
        return to_utc(latest.created_at, self.store_timezone)


class RestSubmissionHistoryProvider:
    """
    Last-submission lookups over the host's REST API.

    HTTP and network errors are raised to the caller.
    """

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def last_submission_instant(self, actor_id: int) -> Optional[datetime]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        params = {
            "author": actor_id,
            "status": ",".join(QUALIFYING_STATUSES),
            "orderby": "date",
            "order": "desc",
            "per_page": 1,
            "_fields": "id,date_gmt",
        }
        response = requests.get(
            f"{self.base_url}/posts", params=params, headers=headers, timeout=self.timeout
        )
        response.raise_for_status()

        items = response.json()
        if not items:
            return None

        date_gmt = items[0].get("date_gmt")
        if not date_gmt:
            logger.debug("Latest post for author %s has no date_gmt", actor_id)
            return None
        return to_utc(datetime.fromisoformat(date_gmt))


def history_provider_for(session, config) -> SubmissionHistoryProvider:
    """Pick the REST provider when an API base URL is configured, else the database."""
    if config.api_base_url:
        return RestSubmissionHistoryProvider(config.api_base_url, api_key=config.api_key)
    return SqlSubmissionHistoryProvider(session, store_timezone=config.store_timezone)
