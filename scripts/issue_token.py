#!/usr/bin/env python3
"""
Issue a bearer token for a coach identity, for use against the API.
Run from project root: python3 scripts/issue_token.py coach-alice --minutes 60
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from team_roster.auth import create_access_token, decode_token


def main() -> None:
    parser = argparse.ArgumentParser(description="Issue a JWT whose subject is the coach identity.")
    parser.add_argument("principal", help="Opaque caller identity recorded as team owner")
    parser.add_argument("--minutes", type=int, default=None, help="Expiry in minutes (default from settings)")
    args = parser.parse_args()

    if not args.principal.strip():
        raise SystemExit("principal must not be empty")
    token = create_access_token(args.principal, expires_minutes=args.minutes)
    if decode_token(token) != args.principal:
        raise SystemExit("Issued token did not round-trip; check JWT_SECRET_KEY / JWT_ALGORITHM")
    print(token)


if __name__ == "__main__":
    main()
