from urllib.parse import quote, urlsplit


def is_relay_url(url: str, proxy_path: str) -> bool:
    try:
        path = urlsplit(url).path
    except ValueError:
        return False
    return path.rstrip("/") == proxy_path.rstrip("/")


def proxied_image_url(
    original: str | None,
    allowed_hosts: frozenset[str],
    proxy_path: str = "/api/image-proxy",
    placeholder: str = "/images/placeholder.jpg",
) -> str:
    """Point an allow-listed image URL at the image relay.

    Idempotent: a URL that already targets the relay, a relative URL, or a URL
    from any other host is returned unchanged. Empty input maps to the placeholder.
    """
    if not original or not original.strip():
        return placeholder

    if is_relay_url(original, proxy_path):
        return original

    try:
        host = urlsplit(original).hostname
    except ValueError:
        return original

    if not host or host.lower() not in allowed_hosts:
        return original

    return f"{proxy_path}?url={quote(original, safe='')}"
