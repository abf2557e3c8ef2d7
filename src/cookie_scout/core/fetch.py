"""Fetch layer: retrieve a page and extract its cookies and resource identifiers."""

from __future__ import annotations

import logging
from html.parser import HTMLParser

import httpx

from cookie_scout.core.base import Cookie, PageSnapshot
from cookie_scout.core.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from cookie_scout.core.exceptions import FetchError

logger = logging.getLogger(__name__)

# tag -> attribute holding the resource URL
_RESOURCE_ATTRS: dict[str, str] = {
    "script": "src",
    "img": "src",
    "iframe": "src",
    "link": "href",
}


def normalize_url(url: str) -> str:
    """Prefix https:// when no scheme is given."""
    url = url.strip()
    if not url.lower().startswith(("http://", "https://")):
        return f"https://{url}"
    return url


def parse_set_cookie(header: str) -> Cookie:
    """Parse one Set-Cookie header value.

    Never raises: unknown or malformed attributes are ignored and a missing
    name yields an empty name.
    """
    parts = header.split(";")
    name, _, value = parts[0].partition("=")

    attrs: dict[str, str | bool] = {}
    for part in parts[1:]:
        key, sep, attr_value = part.strip().partition("=")
        key = key.strip().lower()
        if not key:
            continue
        attrs[key] = attr_value.strip() if sep else True

    domain = attrs.get("domain")
    path = attrs.get("path")
    same_site = attrs.get("samesite")

    return Cookie(
        name=name.strip(),
        value=value.strip(),
        domain=domain.lower() if isinstance(domain, str) and domain else None,
        path=path if isinstance(path, str) and path else None,
        secure="secure" in attrs,
        http_only="httponly" in attrs,
        same_site=same_site if isinstance(same_site, str) and same_site else None,
    )


class _ResourceExtractor(HTMLParser):
    """Collect script/img/iframe sources, link hrefs and inline script bodies."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.resources: list[str] = []
        self._inline_script: list[str] | None = None

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        tag = tag.lower()
        wanted = _RESOURCE_ATTRS.get(tag)
        if wanted is None:
            return

        value = None
        for name, attr_value in attrs:
            if name.lower() == wanted and attr_value:
                value = attr_value.strip()
                break

        if value:
            self.resources.append(value)
        elif tag == "script":
            self._inline_script = []

    def handle_data(self, data: str) -> None:
        if self._inline_script is not None:
            self._inline_script.append(data)

    def handle_endtag(self, tag: str) -> None:
        if tag.lower() == "script" and self._inline_script is not None:
            body = "".join(self._inline_script).strip()
            if body:
                self.resources.append(body)
            self._inline_script = None


def extract_resources(html: str) -> list[str]:
    """Resource identifiers referenced by an HTML document, in document order."""
    parser = _ResourceExtractor()
    parser.feed(html)
    parser.close()
    return parser.resources


async def fetch_snapshot(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PageSnapshot:
    """Fetch *url* and build the snapshot the analysis core works on.

    Raises FetchError for transport failures and non-HTML responses.
    """
    url = normalize_url(url)
    headers = {"User-Agent": user_agent}

    try:
        async with httpx.AsyncClient(
            headers=headers,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        ) as client:
            response = await client.get(url)
            body = response.text
    except httpx.HTTPError as e:
        raise FetchError(url, str(e) or type(e).__name__) from e

    content_type = response.headers.get("content-type", "")
    if content_type and "html" not in content_type.lower():
        raise FetchError(url, f"not an HTML page ({content_type})")

    if response.status_code >= 400:
        logger.warning("%s answered HTTP %d, analyzing the error page", url, response.status_code)

    # Cookies set along a redirect chain count too
    cookies: list[Cookie] = []
    for hop in [*response.history, response]:
        for header in hop.headers.get_list("set-cookie"):
            cookies.append(parse_set_cookie(header))

    resources = extract_resources(body)
    logger.debug("Fetched %s: %d cookies, %d resources", url, len(cookies), len(resources))

    return PageSnapshot(
        url=url,
        cookies=tuple(cookies),
        resources=tuple(resources),
        final_url=str(response.url),
        status_code=response.status_code,
    )
