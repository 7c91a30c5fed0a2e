"""Shared utilities: datetime, generators, formatting, user agents."""

from stash.shared.utils.datetime import (
    from_timestamp_ms_utc,
    month_partition,
    now_millis,
    utc_now,
)
from stash.shared.utils.formatting import format_bytes
from stash.shared.utils.generators import (
    generate_stored_filename,
    generate_token,
    random_string,
    word_string,
    zero_width_string,
)
from stash.shared.utils.user_agents import is_bot

__all__ = [
    "format_bytes",
    "from_timestamp_ms_utc",
    "generate_stored_filename",
    "generate_token",
    "is_bot",
    "month_partition",
    "now_millis",
    "random_string",
    "utc_now",
    "word_string",
    "zero_width_string",
]
