"""Public URL construction for resources."""

from __future__ import annotations

from urllib.parse import quote

_DEFAULT_PORTS = {80, 443}


class UrlBuilder:
    """Builds http[s]://domain[:port]/... URLs the way clients will see them.

    The port is omitted for 80/443 and whenever the service runs behind a
    reverse proxy.
    """

    def __init__(self, domain: str, port: int, use_ssl: bool = False, is_proxied: bool = False) -> None:
        self.domain = domain
        self.port = port
        self.scheme = "https" if use_ssl else "http"
        self.is_proxied = is_proxied

    def base(self, domain: str | None = None) -> str:
        host = domain or self.domain
        if self.port in _DEFAULT_PORTS or self.is_proxied:
            return f"{self.scheme}://{host}"
        return f"{self.scheme}://{host}:{self.port}"

    def resource(self, resource_id: str, domain: str | None = None) -> str:
        return f"{self.base(domain)}/{quote(resource_id)}"

    def direct(self, resource_id: str, domain: str | None = None) -> str:
        return f"{self.resource(resource_id, domain)}/direct"

    def thumbnail(self, resource_id: str, domain: str | None = None) -> str:
        return f"{self.resource(resource_id, domain)}/thumbnail"

    def oembed(self, resource_id: str, domain: str | None = None) -> str:
        return f"{self.resource(resource_id, domain)}/oembed.json"

    def delete(self, stored_filename: str, domain: str | None = None) -> str:
        return f"{self.base(domain)}/delete/{quote(stored_filename)}"
