"""Credential table: token -> Identity, persisted as {"users": {...}} in auth.json.

The file is also written by operators out of band (scripts/new_token.py);
reload() merges such changes into memory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from stash.application.services.id_generator import IdGenerator
from stash.domain.entities.identity import Identity
from stash.infrastructure.persistence.json_snapshot import read_snapshot, write_snapshot
from stash.shared.utils.generators import generate_token

logger = logging.getLogger(__name__)


def _parse_users(raw: object) -> dict[str, Identity]:
    if not isinstance(raw, dict):
        raise ValueError("credential file must hold a JSON object")
    users = raw.get("users") or {}
    if not isinstance(users, dict) or not all(isinstance(v, dict) for v in users.values()):
        raise ValueError('"users" must map tokens to identity objects')
    return {token: Identity.from_dict(value) for token, value in users.items()}


class CredentialStore:
    """Process-wide identity table.

    authenticate() never mutates. record_upload() and reload() change the
    table synchronously (no awaits), so each is atomic on the event loop.
    Snapshots race last-writer-wins with external edits.
    """

    def __init__(self, path: Path, id_generator: IdGenerator) -> None:
        self.path = Path(path)
        self.id_generator = id_generator
        self._users: dict[str, Identity] = {}

    def load(self, bootstrap_username: str = "stash") -> str | None:
        """Read auth.json; if absent, create it with one bootstrap identity.

        Returns:
            The bootstrap token when one was generated (shown to the operator once), else None.
        """
        bootstrap_token: str | None = None
        if not self.path.exists():
            bootstrap_token = generate_token()
            self._users = {bootstrap_token: Identity(username=bootstrap_username)}
            self.persist()
            logger.warning(
                "File [%s] created. Save this token in a secure spot: %s",
                self.path.name,
                bootstrap_token,
            )
        else:
            self._users = _parse_users(read_snapshot(self.path))
            logger.info("File [%s] exists (%d users)", self.path.name, len(self._users))
        return bootstrap_token

    def persist(self) -> None:
        write_snapshot(
            self.path,
            {"users": {token: identity.to_dict() for token, identity in self._users.items()}},
        )

    def authenticate(self, token: str | None) -> Identity | None:
        """Return the identity for token, or None. Pure lookup."""
        if not token:
            return None
        return self._users.get(token)

    def username_taken(self, username: str) -> bool:
        return any(identity.username == username for identity in self._users.values())

    def record_upload(self, token: str) -> Identity:
        """Count one upload for token, registering it first if unknown; then snapshot."""
        identity = self._users.get(token)
        if identity is None:
            identity = Identity(username=self.id_generator.generate_username(self.username_taken))
            self._users[token] = identity
            logger.info("Registered new identity %s", identity.username)
        identity.record_upload()
        self.persist()
        return identity

    def reload(self) -> bool:
        """Merge auth.json into memory if its token set differs.

        Tokens on both sides keep the larger count so accounting done since the
        last snapshot survives. Returns True when in-memory state was replaced.
        """
        try:
            on_disk = _parse_users(read_snapshot(self.path))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Could not reload %s: %s", self.path.name, e)
            return False

        if set(on_disk) == set(self._users):
            return False

        added = [token for token in on_disk if token not in self._users]
        removed = [token for token in self._users if token not in on_disk]
        for token, identity in on_disk.items():
            current = self._users.get(token)
            if current is not None:
                identity.count = max(identity.count, current.count)
        self._users = on_disk
        for token in added:
            logger.info("New token added: %s (%s)", token, on_disk[token].username)
        for token in removed:
            logger.info("Token removed: %s", token)
        return True

    def __len__(self) -> int:
        return len(self._users)

    def __contains__(self, token: object) -> bool:
        return token in self._users

    def tokens(self) -> list[str]:
        return list(self._users)

    def issue_token(self, username: str | None = None) -> tuple[str, Identity]:
        """Add a fresh token (random username when none given) and snapshot."""
        token = generate_token()
        if not username:
            username = self.id_generator.generate_username(self.username_taken)
        identity = Identity(username=username)
        self._users[token] = identity
        self.persist()
        return token, identity
