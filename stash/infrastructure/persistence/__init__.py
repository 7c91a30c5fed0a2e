"""Durable state: resource and credential tables as JSON snapshots."""

from stash.infrastructure.persistence.credential_store import CredentialStore
from stash.infrastructure.persistence.credential_watcher import (
    CredentialChangeEvent,
    CredentialReloader,
)
from stash.infrastructure.persistence.resource_store import ResourceStore

__all__ = [
    "CredentialChangeEvent",
    "CredentialReloader",
    "CredentialStore",
    "ResourceStore",
]
