"""Issue a new upload token and add it to auth.json.

Usage:
    python -m scripts.new_token [username]

A running server picks the change up through its credential watcher.
"""

import sys

from stash.application.services import IdGenerator
from stash.core.config import get_settings
from stash.infrastructure.persistence import CredentialStore


def main() -> None:
    """Append one identity and print its token."""
    if len(sys.argv) > 2:
        print("Usage: python -m scripts.new_token [username]", file=sys.stderr)
        sys.exit(1)
    username = sys.argv[1] if len(sys.argv) == 2 else None

    settings = get_settings()
    settings.data_path.mkdir(parents=True, exist_ok=True)
    store = CredentialStore(settings.credentials_file, IdGenerator(settings.id_max_attempts))
    if settings.credentials_file.exists():
        store.load()
    token, identity = store.issue_token(username)
    print(f"Token for {identity.username}: {token}")


if __name__ == "__main__":
    main()
