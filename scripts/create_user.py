#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from flowva.auth.passwords import hash_password
from flowva.config import Settings
from flowva.core.validation import check_email, check_new_password
from flowva.errors import EmailAlreadyRegistered, InputError
from flowva.infra.db import Database
from flowva.infra.user_repo import CredentialStore


def main() -> None:
    settings = Settings.from_env()
    database = Database(settings.database_url)
    database.init_schema()
    users = CredentialStore(database)

    try:
        email = check_email(input("Email: "))
        name = input(f"Name [{email.split('@')[0]}]: ").strip() or email.split("@")[0]
        pw1 = check_new_password(getpass("Password: "))
    except InputError as e:
        raise SystemExit(e.message)
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        user = users.create(email, hash_password(pw1), name=name)
    except EmailAlreadyRegistered:
        raise SystemExit(f"Email already in use: {email}")
    print(f"OK -> {user.id} ({user.email}) in {settings.database_url}")


if __name__ == "__main__":
    main()
