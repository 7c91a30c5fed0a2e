"""Shared cross-cutting helpers: logging setup and small utilities."""
