from collections.abc import Awaitable, Callable

import httpx

RequestHook = Callable[[httpx.Request], Awaitable[None]]


async def post_raw(
    url: str,
    content: bytes,
    headers: dict[str, str],
    timeout: float,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        return await client.post(url, content=content, headers=headers)


async def get_raw(
    url: str,
    headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    request_hooks: list[RequestHook] | None = None,
) -> httpx.Response:
    # No explicit timeout: the httpx client default applies.
    # Request hooks run before every hop, redirects included.
    async with httpx.AsyncClient(
        transport=transport,
        follow_redirects=True,
        event_hooks={"request": request_hooks or []},
    ) as client:
        return await client.get(url, headers=headers)
