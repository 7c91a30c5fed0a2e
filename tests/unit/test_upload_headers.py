"""Tests for upload header parsing helpers."""

import pytest

from stash.api.routes.uploads import bearer_token


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (None, None),
        ("", None),
        ("   ", None),
        ("raw-token", "raw-token"),
        ("Bearer abc", "abc"),
        ("bearer  abc ", "abc"),
        ("Bearer", None),
        ("Bearer   ", None),
    ],
)
def test_bearer_token(header, expected) -> None:
    assert bearer_token(header) == expected
