import argparse
import getpass
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from credential_store.application.services.credential_service import CredentialService
from credential_store.core.logging import configure_logging
from credential_store.core.security import SecretHasher
from credential_store.domain.errors import CredentialStoreError
from credential_store.infrastructure.persistence.sqlite import SQLitePersistence


def _read_secret() -> str:
    secret = getpass.getpass("Secret: ")
    confirmation = getpass.getpass("Repeat secret: ")
    if secret != confirmation:
        raise SystemExit("Secrets do not match.")
    return secret


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Create an account in the credential store.")
    parser.add_argument("email")
    parser.add_argument("handle")
    parser.add_argument("--first-name")
    parser.add_argument("--last-name")
    parser.add_argument("--language")
    parser.add_argument(
        "--database",
        type=Path,
        default=None,
        help="SQLite file (defaults to DATABASE_PATH or data/credentials.db)",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=int(os.getenv("BCRYPT_ROUNDS", "12")),
        help="bcrypt cost factor (defaults to BCRYPT_ROUNDS or 12)",
    )
    parser.add_argument("--log-level", default=None, help="overrides LOG_LEVEL")
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    database = args.database
    if database is None:
        database = Path(os.getenv("DATABASE_PATH", "data/credentials.db"))

    secret = _read_secret()
    hasher = SecretHasher(rounds=args.rounds)
    try:
        persistence = SQLitePersistence(database.resolve(), hasher)
    except CredentialStoreError as exc:
        print(f"Unable to open database: {exc}", file=sys.stderr)
        return 1
    try:
        service = CredentialService(persistence, hasher)
        user_id = service.create_user(
            email=args.email,
            secret=secret,
            handle=args.handle,
            first_name=args.first_name,
            last_name=args.last_name,
            language=args.language,
        )
    except CredentialStoreError as exc:
        print(f"Unable to create user: {exc}", file=sys.stderr)
        return 1
    finally:
        persistence.close()

    print("Created user", user_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
