"""
Post Time Limit: minimum interval between a user's post submissions.

Runs as a pre-submission check in a form pipeline:
1. Resolve the form's time limit policy from its settings blob
2. Look up the user's most recent post (published, draft, pending or scheduled)
3. Admit, or reject with a 403 and how long the user still has to wait

Storage and form lookups are injected, so the check itself holds no state.
"""

__version__ = "1.0.0"
