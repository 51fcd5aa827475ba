"""Print an ADMIN_CREDENTIALS entry with a bcrypt password hash.

Usage:
    python scripts/generate_admin_hash.py admin "Administrator"

The password is read from the terminal without echo. Append the printed
entry to ADMIN_CREDENTIALS (comma-separated) in the environment.
"""

from __future__ import annotations

import argparse
import getpass
import sys

import bcrypt


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("username")
    parser.add_argument("name", nargs="?", default="")
    args = parser.parse_args(argv)

    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Repeat password: "):
        print("Passwords do not match", file=sys.stderr)
        return 1

    password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=12)).decode()
    entry = f"{args.username}:{password_hash}"
    if args.name:
        entry += f":{args.name}"
    print(entry)
    return 0


if __name__ == "__main__":
    sys.exit(main())
