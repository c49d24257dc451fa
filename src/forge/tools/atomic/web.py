"""
Web tools - fetch a page as readable text, search the web.

Fetch converts HTML to markdown-style text with html2text. Search scrapes
the DuckDuckGo HTML endpoint with BeautifulSoup and degrades to a single
synthetic result when the page cannot be parsed.

All requests are logged to <log_dir>/fetch_log.jsonl (see forge.audit).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence
from urllib.parse import parse_qs, quote_plus, urlparse

import html2text
import requests
from bs4 import BeautifulSoup

from ...audit import AuditLog
from ...defaults import (
    SEARCH_RESULT_LIMIT, SEARCH_URL, SEARCH_USER_AGENT, WEB_TIMEOUT, WEB_USER_AGENT,
)
from ...errors import NetworkError
from ..registry import BaseTool


@dataclass
class FetchResult:
    url: str        # final URL after redirects
    content: str


@dataclass
class SearchResult:
    title: str
    url: str
    snippet: str


def _html_converter() -> html2text.HTML2Text:
    converter = html2text.HTML2Text()
    converter.ignore_links = False
    converter.ignore_images = True
    converter.ignore_emphasis = False
    converter.body_width = 0  # No wrapping
    return converter


def html_to_text(html: str) -> str:
    """Convert HTML to readable markdown-style text."""
    text = _html_converter().handle(html)
    # Clean up excessive newlines
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def fetch_url(url: str, timeout: float = WEB_TIMEOUT, audit: Optional[AuditLog] = None) -> FetchResult:
    """GET `url` and return its content as readable text. Raises NetworkError."""
    if not url:
        raise NetworkError("No URL provided")

    headers = {"User-Agent": WEB_USER_AGENT}
    try:
        response = requests.get(url, timeout=timeout, headers=headers, allow_redirects=True)
        response.raise_for_status()
    except requests.RequestException as e:
        if audit:
            status = getattr(getattr(e, "response", None), "status_code", None)
            audit.log_fetch(url, None, status, "", success=False, error=str(e))
        raise NetworkError(f"Failed to fetch {url}: {e}") from e

    content_type = response.headers.get("Content-Type", "").lower()
    if "html" in content_type or "<html" in response.text[:1000].lower():
        content = html_to_text(response.text)
    else:
        content = response.text

    if audit:
        audit.log_fetch(url, response.url, response.status_code, content, success=True)

    return FetchResult(url=response.url, content=content)


def _result_url(href: str) -> str:
    """Unwrap DuckDuckGo's /l/?uddg= redirect links."""
    if href.startswith("//"):
        href = "https:" + href
    parsed = urlparse(href)
    if parsed.path.startswith("/l/"):
        target = parse_qs(parsed.query).get("uddg")
        if target:
            return target[0]
    return href


def parse_search_results(html: str, limit: int = SEARCH_RESULT_LIMIT) -> List[SearchResult]:
    soup = BeautifulSoup(html, "html.parser")
    results = []
    for block in soup.select(".result"):
        link = block.select_one("a.result__a")
        if link is None:
            continue
        snippet = block.select_one(".result__snippet")
        results.append(SearchResult(
            title=link.get_text(strip=True),
            url=_result_url(link.get("href", "")),
            snippet=snippet.get_text(" ", strip=True) if snippet else "",
        ))
        if len(results) >= limit:
            break
    return results


def web_search(query: str, timeout: float = WEB_TIMEOUT, audit: Optional[AuditLog] = None) -> List[SearchResult]:
    """
    Search DuckDuckGo. Never empty: an unparseable page yields one
    "No detailed results available" entry pointing at the search URL.
    Transport failures raise NetworkError.
    """
    if not query or not query.strip():
        raise NetworkError("No search query provided")

    url = f"{SEARCH_URL}?q={quote_plus(query)}"
    try:
        response = requests.get(url, timeout=timeout, headers={"User-Agent": SEARCH_USER_AGENT})
        response.raise_for_status()
    except requests.RequestException as e:
        if audit:
            audit.log_fetch(url, None, None, "", success=False, kind="search", error=str(e))
        raise NetworkError(f"Search failed: {e}") from e

    results = parse_search_results(response.text)
    if audit:
        audit.log_fetch(url, response.url, response.status_code, response.text,
                        success=True, kind="search")

    if not results:
        results.append(SearchResult(
            title=f"Search: {query}",
            url=f"https://duckduckgo.com/?q={quote_plus(query)}",
            snippet="No detailed results available",
        ))
    return results


class WebFetchTool(BaseTool):
    name = "webfetch"
    usage = "webfetch <url>"
    summary = "Fetch a web page as readable text"

    def __init__(self, audit: Optional[AuditLog] = None, timeout: float = WEB_TIMEOUT):
        self.audit = audit
        self.timeout = timeout

    def run(self, args: Sequence[str]) -> str:
        result = fetch_url(self.arg(args, 0), self.timeout, self.audit)
        return f"URL: {result.url}\n\n{result.content}"


class WebSearchTool(BaseTool):
    name = "websearch"
    usage = "websearch <query>"
    summary = "Search the web (title, url, snippet per result)"

    def __init__(self, audit: Optional[AuditLog] = None, timeout: float = WEB_TIMEOUT):
        self.audit = audit
        self.timeout = timeout

    def run(self, args: Sequence[str]) -> str:
        results = web_search(" ".join(args), self.timeout, self.audit)
        lines = []
        for i, r in enumerate(results, 1):
            lines.append(f"{i}. {r.title}\n   {r.url}\n   {r.snippet}")
        return "\n".join(lines)
