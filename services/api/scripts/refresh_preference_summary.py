"""Recompute the rolling preference summary outside the request path.

Usage: python scripts/refresh_preference_summary.py
"""
import sys
import os

# Add api path to sys.path
sys.path.append(os.path.join(os.path.dirname(__file__), "../"))

from pantrypal.db import session_scope
from pantrypal.ai.errors import GenerationError
from pantrypal.services.preferences import refresh_preference_summary
from pantrypal.settings import settings


def main() -> int:
    print(f"Connecting to {settings.database_url}...")
    try:
        with session_scope() as db:
            summary = refresh_preference_summary(db)
            if summary is None:
                print("No feedback to summarize.")
                return 0
            print(f"Summary updated ({len(summary.summary_text)} chars):")
            print(summary.summary_text)
    except GenerationError as e:
        print(f"Error [{e.error_kind}]: {e.message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
