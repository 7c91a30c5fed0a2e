"""External services: storage backends, post-processors, notifiers."""
