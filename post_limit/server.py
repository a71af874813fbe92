"""
Post Time Limit MCP Server

Standalone MCP server that exposes the time limit check to agents that
submit through the host's forms. Thin wrapper around post_limit.hook and
post_limit.gate.
"""
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

# Initialize FastMCP server
mcp = FastMCP("post-time-limit")


@mcp.tool()
async def time_limit_check(alias: str, actor_id: Optional[int] = None) -> dict[str, Any]:
    """
    Run the pre-submission time limit check for a form.

    Call this before submitting a post through a form. If the user posted
    too recently, the submission would be rejected; the response says how
    long to wait. DO NOT retry before then.

    Args:
        alias: Form alias the submission goes through
        actor_id: Logged-in user ID (omit for anonymous submissions, which are never limited)

    Returns:
        Admitted: {"admitted": True}
        Blocked: {"admitted": False, "status": 403, "message": "...", "retry_after": N}
    """
    from post_limit.config import load_config
    from post_limit.database import ensure_local_db, session_scope
    from post_limit.hook import before_form_process
    from post_limit.providers import SqlFormConfigProvider, history_provider_for

    config = load_config()
    ensure_local_db(config)
    with session_scope() as session:
        result = before_form_process(
            {"form_alias": alias},
            actor_id=actor_id,
            forms=SqlFormConfigProvider(session),
            history=history_provider_for(session, config),
            config=config,
        )

    if result is None:
        return {"admitted": True}
    return {"admitted": False, **result}


@mcp.tool()
async def time_limit_status(alias: str, actor_id: int) -> dict[str, Any]:
    """
    Show a user's cooldown state for a form without submitting anything.

    Args:
        alias: Form alias
        actor_id: User ID

    Returns:
        {"enabled": bool, "interval_seconds": N, "available": bool,
         "seconds_remaining": N, "wait": "...", "last_submission": "iso"}
        or {"error": "..."} when the form does not exist
    """
    from post_limit.config import load_config
    from post_limit.database import ensure_local_db, session_scope
    from post_limit.gate import cooldown_status
    from post_limit.policy import resolve_policy
    from post_limit.providers import SqlFormConfigProvider, history_provider_for

    config = load_config()
    ensure_local_db(config)
    with session_scope() as session:
        form = SqlFormConfigProvider(session).lookup_form_by_alias(alias)
        if form is None:
            return {"error": f"Form '{alias}' not found."}
        return cooldown_status(
            actor_id,
            resolve_policy(form.config_blob),
            history_provider_for(session, config),
        )


def main():
    """Entry point for running the MCP server via stdio."""
    mcp.run()


if __name__ == "__main__":
    main()
