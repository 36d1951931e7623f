"""Reverse-proxy rules of the development server.

A rule forwards every request whose URL matches its context to the rule's
target origin.  The path and query string are kept as they are; only the
origin changes.  There is no retry, timeout or balancing policy: one
request in, one upstream request out.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from urllib.parse import quote, urlsplit

import httpx
from fastapi import Request
from fastapi.responses import PlainTextResponse, Response

from elemental.backend.schemas import ProxyRuleIn

logger = logging.getLogger(__name__)

# Connection-scoped headers (RFC 9110 §7.6.1) plus the ones httpx recomputes.
HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "content-length",
    }
)


def rule_matches(rule: ProxyRuleIn, url: str) -> bool:
    """Prefix match, or regex search when the context starts with ``^``."""
    if rule.context.startswith("^"):
        return re.search(rule.context, url) is not None
    return url.startswith(rule.context)


def find_rule(rules: Iterable[ProxyRuleIn], url: str) -> ProxyRuleIn | None:
    """First rule in declaration order that matches ``url``."""
    for rule in rules:
        if rule_matches(rule, url):
            return rule
    return None


def upstream_url(rule: ProxyRuleIn, url: str) -> str:
    """Target origin joined with the untouched request path and query."""
    return f"{rule.target}{url}"


def upstream_headers(rule: ProxyRuleIn, headers: Mapping[str, str]) -> dict[str, str]:
    """Request headers to send upstream.

    With ``change_origin`` the ``Host`` header names the target instead of
    the dev server.
    """
    forwarded = {k: v for k, v in headers.items() if k.lower() not in HOP_BY_HOP}
    if rule.change_origin:
        forwarded = {k: v for k, v in forwarded.items() if k.lower() != "host"}
        forwarded["host"] = urlsplit(rule.target).netloc
    return forwarded


def downstream_headers(headers: httpx.Headers) -> list[tuple[str, str]]:
    # httpx already decoded the body, so the encoding header no longer applies.
    return [
        (k, v)
        for k, v in headers.multi_items()
        if k.lower() not in HOP_BY_HOP and k.lower() != "content-encoding"
    ]


def request_url(request: Request) -> str:
    """Path and query exactly as the client sent them, still percent-encoded."""
    raw_path = request.scope.get("raw_path")
    if raw_path is None:
        # raw_path is optional in ASGI; re-quote the decoded path
        path = quote(request.scope["path"], safe="/:@!$&'()*+,;=-._~")
    else:
        path = raw_path.decode("latin-1")
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


async def forward(client: httpx.AsyncClient, rule: ProxyRuleIn, request: Request) -> Response:
    """Send ``request`` to the rule's target and relay the answer."""
    url = request_url(request)
    target = upstream_url(rule, url)
    body = await request.body()

    try:
        upstream = await client.request(
            request.method,
            target,
            headers=upstream_headers(rule, request.headers),
            content=body or None,
        )
    except httpx.HTTPError as exc:
        logger.error("http proxy error: %s %s -> %s: %s", request.method, url, target, exc)
        return PlainTextResponse("", status_code=500)

    logger.debug("%s %s -> %s %d", request.method, url, target, upstream.status_code)
    response = Response(content=upstream.content, status_code=upstream.status_code)
    for key, value in downstream_headers(upstream.headers):
        response.headers.append(key, value)
    return response
