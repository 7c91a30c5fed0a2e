"""Public resource identifier generation with collision avoidance."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable

from stash.domain.entities.resource import split_extension
from stash.domain.enums import IdStrategy
from stash.domain.exceptions import ExhaustedIdSpaceException
from stash.shared.utils.generators import random_string, word_string, zero_width_string

logger = logging.getLogger(__name__)

USERNAME_LENGTH = 20

# Characters kept from an uploaded filename when it becomes the identifier.
_UNSAFE_ID_CHARS = re.compile(r"[^\w\-.~]+")


def sanitize_original_stem(original_name: str) -> str:
    """Return the uploaded filename's stem reduced to URL-safe characters."""
    name = os.path.basename(original_name.replace("\\", "/")).replace("\x00", "")
    stem, _ = split_extension(name)
    stem = _UNSAFE_ID_CHARS.sub("_", stem).strip("._ ")
    return stem or "file"


class IdGenerator:
    """Mint identifiers that do not collide with any live resource key.

    Each strategy produces a candidate stem; the generator retries while
    is_taken(stem) holds, up to max_attempts, then raises
    ExhaustedIdSpaceException. The uploaded file's extension is appended
    after the uniqueness check.
    """

    def __init__(self, max_attempts: int = 10) -> None:
        self.max_attempts = max_attempts
        self._strategies: dict[IdStrategy, Callable[[int, int, str], str]] = {
            IdStrategy.RANDOM: lambda length, _alt, _name: random_string(length),
            IdStrategy.GFYCAT: lambda _length, alt, _name: word_string(alt),
            IdStrategy.ZWS: lambda length, _alt, _name: zero_width_string(length),
            IdStrategy.ORIGINAL: lambda _length, _alt, name: sanitize_original_stem(name),
        }

    def _unique(
        self,
        candidate: Callable[[], str],
        is_taken: Callable[[str], bool],
        label: str,
        attempts: int | None = None,
    ) -> str:
        limit = attempts or self.max_attempts
        for attempt in range(1, limit + 1):
            value = candidate()
            if not is_taken(value):
                return value
            logger.debug("Identifier collision (%s), attempt %d/%d", label, attempt, limit)
        raise ExhaustedIdSpaceException(label, limit)

    def generate(
        self,
        strategy: IdStrategy,
        length: int,
        alt_length: int,
        original_name: str,
        is_taken: Callable[[str], bool],
    ) -> str:
        """Return a fresh resource id: a unique stem plus the original extension.

        Args:
            strategy: How to compose the stem.
            length: Character count for random and zws stems.
            alt_length: Adjective count for gfycat stems.
            original_name: Uploaded filename (extension source; stem for 'original').
            is_taken: Predicate over stems, normally ResourceStore.contains.

        The original strategy always yields the same stem, so it gets a
        single attempt: a second upload under a live name fails at once.

        Raises:
            ExhaustedIdSpaceException: No free stem within max_attempts.
        """
        make = self._strategies[strategy]
        stem = self._unique(
            lambda: make(length, alt_length, original_name),
            is_taken,
            strategy.value,
            attempts=1 if strategy is IdStrategy.ORIGINAL else None,
        )
        _, extension = split_extension(os.path.basename(original_name))
        return f"{stem}{extension}"

    def generate_username(self, is_taken: Callable[[str], bool]) -> str:
        """Return a random username not accepted by is_taken (same retry policy)."""
        return self._unique(lambda: random_string(USERNAME_LENGTH), is_taken, "username")
