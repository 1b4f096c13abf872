#!/usr/bin/env python3
"""
Vinyl Store -- management command line.

Usage:
  python main.py serve [--host 0.0.0.0] [--port 8000] [--reload]
  python main.py create-admin --email admin@example.com --name "Store Admin"
  python main.py import-products --file catalog.json

Accounts created through POST /signup are always USER accounts. create-admin
is the only way to provision an ADMIN, which the catalog write routes require.
The password is prompted for (never echoed) unless --password is given.

import-products reads a JSON array of product objects and inserts each one,
reporting and skipping entries that fail validation or already exist.

Configuration (MONGO_URI, MONGO_DB_NAME, SECRET_KEY, ...) is read from the
environment or .env -- see core/config.py.
"""

import argparse
import getpass
import json
import sys
from pathlib import Path
from typing import Optional

from pymongo.database import Database

from auth.models import ROLE_ADMIN
from auth.store import UserStore
from auth.tokens import WEAK_PASSWORD_MESSAGE, check_password_policy, hash_password
from catalog.store import ProductStore
from core.config import get_settings
from core.db import DuplicateDocumentError, create_client, get_database
from core.validation import DocumentValidationError


def create_admin(db: Database, email: str, name: str, password: str) -> Optional[str]:
    """Create an ADMIN account. Returns the new id, or None after printing why not."""
    if not check_password_policy(password):
        print(f"  [!] {WEAK_PASSWORD_MESSAGE}")
        return None
    store = UserStore(db)
    try:
        user = store.create_user({"email": email, "name": name}, hash_password(password), role=ROLE_ADMIN)
    except DuplicateDocumentError:
        print(f"  [!] '{email}' is already registered.")
        return None
    except DocumentValidationError as e:
        print(f"  [!] {e}")
        return None
    print(f"  Admin {user.email} created ({user.id}).")
    return user.id


def _load_products(path: str) -> list[dict]:
    """Read a JSON array of product objects. Returns [] with a message on any problem."""
    file_path = Path(path).resolve()
    if not file_path.is_file():
        print(f"  [!] '{path}' is not a readable file.")
        return []
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"  [!] Could not read '{path}': {e}")
        return []
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        print(f"  [!] '{path}' must contain a JSON array of objects.")
        return []
    return data


def import_products(db: Database, path: str) -> tuple[int, int]:
    """Insert every product in the file. Returns (inserted, skipped)."""
    items = _load_products(path)
    store = ProductStore(db)
    inserted = skipped = 0
    for index, item in enumerate(items):
        label = item.get("albumName") or f"entry {index}"
        try:
            store.create_product(item)
        except (DocumentValidationError, DuplicateDocumentError) as e:
            print(f"  [!] Skipped {label}: {e}")
            skipped += 1
            continue
        inserted += 1
    print(f"  {inserted} product(s) imported, {skipped} skipped.")
    return inserted, skipped


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="vinyl-store",
        description="Vinyl Store API server and management commands.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development)")

    admin = sub.add_parser("create-admin", help="Create an ADMIN account")
    admin.add_argument("--email", required=True)
    admin.add_argument("--name", required=True)
    admin.add_argument("--password", help="Omit to be prompted securely")

    products = sub.add_parser("import-products", help="Bulk-insert products from a JSON file")
    products.add_argument("--file", required=True, metavar="PATH")

    args = parser.parse_args(argv)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)
        return 0

    settings = get_settings()
    client = create_client(settings)
    try:
        db = get_database(client, settings)
        if args.command == "create-admin":
            password = args.password or getpass.getpass("Admin password: ")
            return 0 if create_admin(db, args.email, args.name, password) else 1
        inserted, skipped = import_products(db, args.file)
        return 0 if inserted or not skipped else 1
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
