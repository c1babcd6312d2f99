"""Print every redeemable demo key with its tier and duration.

Usage: uv run python bin/list-demo-keys.py [--unused]

With --unused, keys already held by an account in the configured store
(ACCOUNTS_STORAGE_PATH) are left out.
"""

import logging
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from accounts.app import create_app
from accounts.duration import duration_label
from accounts.errors import StorageError
from shared.logging import setup_logging


def main() -> None:
    args = sys.argv[1:]
    if args not in ([], ["--unused"]):
        print(f"Usage: {sys.argv[0]} [--unused]")
        sys.exit(1)

    setup_logging(level=logging.WARNING)
    app = create_app()
    try:
        taken = {key.code for account in app.store.list_all() for key in account.keys} if args else set()
    except StorageError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    print("Demo keys available:")
    for key_def in app.catalog:
        if key_def.code in taken:
            continue
        print(f"  {key_def.code} - {key_def.tier} ({duration_label(key_def.duration)})")


if __name__ == "__main__":
    main()
