"""
CLI entry point for the post time limit check.

Usage:
    python -m post_limit check --alias A --actor N [--now ISO]
    python -m post_limit status --alias A --actor N
    python -m post_limit policy --alias A

All output is JSON. Exit codes: 0=admitted/ok, 1=blocked, 2=error.
"""
import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict


def _output(data: Dict[str, Any], exit_code: int = 0):
    """Print JSON output and exit."""
    print(json.dumps(data, indent=2, default=str))
    sys.exit(exit_code)


def _parse_now(value):
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        _output({"success": False, "error": f"Invalid --now timestamp: '{value}'"}, exit_code=2)


def cmd_check(args):
    """Handle check subcommand."""
    from post_limit.config import load_config
    from post_limit.database import ensure_local_db, session_scope
    from post_limit.hook import before_form_process
    from post_limit.providers import SqlFormConfigProvider, history_provider_for

    config = load_config()
    now = _parse_now(args.now)
    ensure_local_db(config)

    with session_scope() as session:
        result = before_form_process(
            {"form_alias": args.alias},
            actor_id=args.actor,
            forms=SqlFormConfigProvider(session),
            history=history_provider_for(session, config),
            now=now,
            config=config,
        )

    if result is None:
        _output({"success": True, "admitted": True})
    _output({"success": False, "admitted": False, **result}, exit_code=1)


def cmd_status(args):
    """Handle status subcommand."""
    from post_limit.config import load_config
    from post_limit.database import ensure_local_db, session_scope
    from post_limit.gate import cooldown_status
    from post_limit.policy import resolve_policy
    from post_limit.providers import SqlFormConfigProvider, history_provider_for

    config = load_config()
    ensure_local_db(config)

    with session_scope() as session:
        form = SqlFormConfigProvider(session).lookup_form_by_alias(args.alias)
        if form is None:
            _output({"success": False, "error": f"Form '{args.alias}' not found."}, exit_code=2)
        status = cooldown_status(
            args.actor,
            resolve_policy(form.config_blob),
            history_provider_for(session, config),
        )

    _output({"alias": args.alias, "actor": args.actor, "form_type": form.form_type, **status})


def cmd_policy(args):
    """Handle policy subcommand."""
    from post_limit.database import ensure_local_db, session_scope
    from post_limit.policy import resolve_policy
    from post_limit.providers import SqlFormConfigProvider

    ensure_local_db()
    with session_scope() as session:
        form = SqlFormConfigProvider(session).lookup_form_by_alias(args.alias)

    if form is None:
        _output({"success": False, "error": f"Form '{args.alias}' not found."}, exit_code=2)

    policy = resolve_policy(form.config_blob)
    _output({
        "alias": args.alias,
        "form_type": form.form_type,
        "enabled": policy.enabled,
        "value": policy.value,
        "unit": policy.unit,
        "interval_seconds": policy.interval_seconds,
    })


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="post-limit",
        description="Time-based post submission limit for logged-in users",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log decisions to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ── check ──
    check_parser = subparsers.add_parser("check", help="Run the pre-submission check")
    check_parser.add_argument("--alias", required=True, help="Form alias")
    check_parser.add_argument("--actor", type=int, help="Logged-in user ID (omit for anonymous)")
    check_parser.add_argument("--now", help="Evaluate at this ISO timestamp instead of now")
    check_parser.set_defaults(func=cmd_check)

    # ── status ──
    status_parser = subparsers.add_parser("status", help="Show a user's cooldown for a form")
    status_parser.add_argument("--alias", required=True, help="Form alias")
    status_parser.add_argument("--actor", type=int, required=True, help="User ID")
    status_parser.set_defaults(func=cmd_status)

    # ── policy ──
    policy_parser = subparsers.add_parser("policy", help="Show the resolved time limit for a form")
    policy_parser.add_argument("--alias", required=True, help="Form alias")
    policy_parser.set_defaults(func=cmd_policy)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(2)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        args.func(args)
    except Exception as e:
        _output({"success": False, "error": str(e)}, exit_code=2)


if __name__ == "__main__":
    main()
