#!/usr/bin/env python3
"""
Reset a portal user's password in the SQLite database.

This script does not read or reveal existing passwords.  It stores a
new hash (the same PBKDF2 format the API uses) for the given email and
can optionally re-enable a disabled account.

Usage:
    python reset_password.py --email admin@agency.com --password "NewStrongPass!234"
    python reset_password.py --db ./dj_agency_api/dj_agency.db --email admin@agency.com --enable

If --password is omitted, you will be prompted to enter it securely.
If --db is omitted, the database configured through DATABASE_URL is used.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from dj_agency_api.app.core.db import get_database_path
from dj_agency_api.app.core.security import hash_password


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset a DJ agency portal user password (SQLite).")
    ap.add_argument("--db", help="Path to SQLite DB file (defaults to DATABASE_URL)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    ap.add_argument("--enable", action="store_true", help="Also clear the disabled flag")
    args = ap.parse_args()

    db_path = args.db or get_database_path()
    if not os.path.exists(db_path):
        print(f"[!] DB not found: {db_path}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < 6:
        print("[!] Password must have at least 6 characters.", file=sys.stderr)
        sys.exit(1)

    email = args.email.strip().lower()
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM profiles WHERE email = ?", (email,))
        if not cur.fetchone():
            print(f"[!] No user found with email: {email}", file=sys.stderr)
            sys.exit(2)

        if args.enable:
            cur.execute(
                "UPDATE profiles SET password = ?, disabled = 0, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
                (hash_password(new_password), email),
            )
        else:
            cur.execute(
                "UPDATE profiles SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
                (hash_password(new_password), email),
            )
        conn.commit()
        print(f"[+] Password updated for user: {email}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
