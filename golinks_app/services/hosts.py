"""
Hostname -> domain selection.
"""

from typing import Optional

from golinks_app.config import settings
from golinks_app.services.link_store import LinkStore


def host_label(host: Optional[str]) -> Optional[str]:
    """
    First DNS label of a Host header, lowercased and without the port.

    "Docs.Example.com:8443" -> "docs". Domain names never contain dots, so
    the first label is the only part that can name one.
    """
    if not host:
        return None
    host = host.strip().lower()
    if host.startswith("["):
        # IPv6 literal, never a domain name
        return None
    name = host.rsplit(":", 1)[0] if ":" in host else host
    return name.split(".", 1)[0] or None


def domain_for_host(host: Optional[str], store: LinkStore) -> str:
    """
    Pick the registered domain for a Host header.

    Anything unregistered (or a missing header) falls back to the default
    domain.
    """
    label = host_label(host)
    if label is not None and store.get_domain(label) is not None:
        return label
    return settings.default_domain
