"""stash: self-hosted file ingestion and delivery service (ShareX-compatible)."""
