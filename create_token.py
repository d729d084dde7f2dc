"""Print a long-lived access token for an existing portal user.

Usage:
    python create_token.py admin@agency.com [days]
"""
import sys

from dj_agency_api.app.core.security import create_access_token


def main() -> None:
    if len(sys.argv) < 2:
        print("usage: python create_token.py EMAIL [DAYS]", file=sys.stderr)
        sys.exit(1)
    email = sys.argv[1]
    days = int(sys.argv[2]) if len(sys.argv) > 2 else 365
    # expires_delta is in seconds
    print(create_access_token({"sub": email}, expires_delta=days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
