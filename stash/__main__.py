"""Run the server: python -m stash."""

import uvicorn

from stash.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "stash.main:app",
        host=settings.host,
        port=settings.port,
        proxy_headers=settings.is_proxied,
        forwarded_allow_ips="*" if settings.is_proxied else None,
    )


if __name__ == "__main__":
    main()
