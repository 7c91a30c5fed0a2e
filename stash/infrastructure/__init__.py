"""Infrastructure: persistence (JSON snapshot stores) and external services (storage, imaging, webhooks)."""
