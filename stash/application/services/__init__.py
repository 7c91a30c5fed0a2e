"""Application services: identifier minting and public URL construction."""

from stash.application.services.id_generator import IdGenerator, sanitize_original_stem
from stash.application.services.urls import UrlBuilder

__all__ = ["IdGenerator", "UrlBuilder", "sanitize_original_stem"]
