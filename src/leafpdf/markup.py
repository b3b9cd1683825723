"""Field extraction from the share page and Set-Cookie folding.

The remote service exposes the session's anti-forgery token and the
project title only as ``<meta>`` tags in server-rendered HTML. Scraping is
kept behind ``SessionMarkupParser`` so the strategy can change without
touching the stages: ``RegexMarkupParser`` is the default,
``MetaTagMarkupParser`` tokenises the document with ``html.parser`` and
tolerates attribute reordering.
"""

from __future__ import annotations

import html
import re
from html.parser import HTMLParser
from typing import Protocol

CSRF_META_NAME = "ol-csrfToken"
TITLE_META_NAME = "og:title"


class SessionMarkupParser(Protocol):
    """Interface for pulling session fields out of share-page markup."""

    def csrf_token(self, markup: str) -> str | None: ...

    def project_title(self, markup: str) -> str | None: ...


def _meta_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf'<meta\s+name="{re.escape(name)}"\s+content="([^"]*)"')


class RegexMarkupParser:
    """Matches the exact ``<meta name=... content=...>`` shape the service renders."""

    _CSRF_RE = _meta_pattern(CSRF_META_NAME)
    _TITLE_RE = _meta_pattern(TITLE_META_NAME)

    def csrf_token(self, markup: str) -> str | None:
        match = self._CSRF_RE.search(markup)
        return html.unescape(match.group(1)) if match and match.group(1) else None

    def project_title(self, markup: str) -> str | None:
        match = self._TITLE_RE.search(markup)
        return html.unescape(match.group(1)) if match and match.group(1) else None


class _MetaCollector(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.meta: dict[str, str] = {}

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag != "meta":
            return
        attributes = dict(attrs)
        name = attributes.get("name") or attributes.get("property")
        content = attributes.get("content")
        # First occurrence wins, matching the regex parser
        if name and content and name not in self.meta:
            self.meta[name] = content


class MetaTagMarkupParser:
    """Collects every ``<meta>`` tag with a real HTML tokenizer."""

    def _collect(self, markup: str) -> dict[str, str]:
        collector = _MetaCollector()
        collector.feed(markup)
        collector.close()
        return collector.meta

    def csrf_token(self, markup: str) -> str | None:
        return self._collect(markup).get(CSRF_META_NAME)

    def project_title(self, markup: str) -> str | None:
        return self._collect(markup).get(TITLE_META_NAME)


def fold_cookies(set_cookie_headers: list[str]) -> str:
    """Fold ``Set-Cookie`` values into one ``Cookie`` request header value.

    Keeps only the ``name=value`` segment of each cookie, in response order,
    joined with ``;``. Returns an empty string when nothing was set.
    """
    pairs = [header.split(";", 1)[0].strip() for header in set_cookie_headers]
    return ";".join(pair for pair in pairs if pair)
