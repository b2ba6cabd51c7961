"""Regex-based helpers for pulling text, links and images out of site HTML."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit, urlunsplit

_SCRIPT_RE = re.compile(r"<(script|style|noscript)\b[^>]*>.*?</\1\s*>", re.I | re.S)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.S)
_BR_RE = re.compile(r"(?:<br\s*/?>)+", re.I)
_BLOCK_END_RE = re.compile(r"</(?:p|div|li|tr|td|h[1-6]|table|ul|ol)\s*>", re.I)
_TAG_RE = re.compile(r"<[^>]+>")
_ANCHOR_RE = re.compile(r"<a\b(?P<attrs>[^>]*)>(?P<inner>.*?)</a\s*>", re.I | re.S)
_IMG_RE = re.compile(r"<img\b(?P<attrs>[^>]*?)/?>", re.I | re.S)
_ATTR_RE = re.compile(
    r"(?P<name>[\w:-]+)\s*=\s*(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'|(?P<bare>[^\s>]+))"
)
_HEADING_RE = re.compile(
    r"<h(?P<level>[1-6])\b[^>]*>(?P<inner>.*?)</h(?P=level)\s*>", re.I | re.S
)
_NEXT_HEADING_RE = re.compile(r"<h[1-6]\b", re.I)
_EMAIL_FULL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")

_SKIP_IMAGE_TOKENS = ("logo", "icon", "favicon", "spacer", "blank.gif")


@dataclass(frozen=True)
class Anchor:
    href: str
    text: str
    attrs: dict[str, str]


def clean_html(fragment: str) -> str:
    """Strip tags from an HTML fragment, one trimmed non-empty line per block."""
    value = _COMMENT_RE.sub("", _SCRIPT_RE.sub("", fragment))
    value = _BR_RE.sub("\n", value)
    value = _BLOCK_END_RE.sub("\n", value)
    value = html.unescape(_TAG_RE.sub("", value))
    value = value.replace("\u00a0", " ").replace("\u200b", "").replace("\r", "\n")
    lines = (re.sub(r"[ \t]+", " ", line).strip() for line in value.split("\n"))
    return "\n".join(line for line in lines if line)


def split_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def parse_attrs(raw: str) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for match in _ATTR_RE.finditer(raw):
        value = match.group("dq") or match.group("sq") or match.group("bare") or ""
        attrs[match.group("name").lower()] = html.unescape(value)
    return attrs


def elements(page: str, tag: str, *, class_contains: str | None = None) -> list[str]:
    """Inner HTML of ``tag`` elements. Nested elements of the same tag are not balanced."""
    pattern = re.compile(
        rf"<{tag}\b(?P<attrs>[^>]*)>(?P<inner>.*?)</{tag}\s*>",
        re.I | re.S,
    )
    found: list[str] = []
    for match in pattern.finditer(page):
        if class_contains is not None:
            classes = parse_attrs(match.group("attrs")).get("class", "")
            if class_contains not in classes:
                continue
        found.append(match.group("inner"))
    return found


def anchors(page: str) -> list[Anchor]:
    found: list[Anchor] = []
    for match in _ANCHOR_RE.finditer(page):
        attrs = parse_attrs(match.group("attrs"))
        found.append(
            Anchor(
                href=attrs.get("href", "").strip(),
                text=clean_html(match.group("inner")),
                attrs=attrs,
            )
        )
    return found


def resolve_href(href: str, base_url: str) -> str | None:
    raw = href.strip()
    if not raw or raw.lower().startswith(("javascript:", "mailto:", "tel:")):
        return None
    return urljoin(base_url, raw)


def strip_query(url: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def image_urls(page: str, base_url: str, *, limit: int | None = None) -> list[str]:
    """Resolved content image URLs in document order, skipping logos and icons."""
    seen: set[str] = set()
    results: list[str] = []
    for match in _IMG_RE.finditer(page):
        attrs = parse_attrs(match.group("attrs"))
        src = attrs.get("data-src") or attrs.get("src") or ""
        resolved = resolve_href(src, base_url)
        if resolved is None or resolved.startswith("data:"):
            continue
        resolved = strip_query(resolved)
        lowered = resolved.lower()
        if any(token in lowered for token in _SKIP_IMAGE_TOKENS):
            continue
        if resolved in seen:
            continue
        seen.add(resolved)
        results.append(resolved)
        if limit is not None and len(results) >= limit:
            break
    return results


def text_after_heading(page: str, contains: str) -> str | None:
    """Text between the first heading mentioning ``contains`` and the next heading."""
    needle = contains.lower()
    for match in _HEADING_RE.finditer(page):
        if needle not in clean_html(match.group("inner")).lower():
            continue
        rest = page[match.end() :]
        stop = _NEXT_HEADING_RE.search(rest)
        block = rest[: stop.start()] if stop else rest
        text = clean_html(block)
        return text or None
    return None


def looks_like_email(value: str | None) -> bool:
    return value is not None and bool(_EMAIL_FULL_RE.match(value.strip()))


def decode_cloudflare_email(encoded: str | None) -> str | None:
    """Decode a Cloudflare-obfuscated address (hex key byte followed by XORed bytes)."""
    if not encoded or len(encoded) < 2 or len(encoded) % 2:
        return None
    try:
        key = int(encoded[:2], 16)
        chars = [chr(int(encoded[i : i + 2], 16) ^ key) for i in range(2, len(encoded), 2)]
    except ValueError:
        return None
    return "".join(chars)


def email_from_anchor(anchor: Anchor) -> str | None:
    if looks_like_email(anchor.text):
        return anchor.text.strip()
    href = anchor.href
    if href.lower().startswith("mailto:"):
        email = href[len("mailto:") :].split("?", 1)[0].strip()
        if looks_like_email(email):
            return email
    if "#" in href:
        decoded = decode_cloudflare_email(href.rsplit("#", 1)[1])
        if looks_like_email(decoded):
            return decoded
    decoded = decode_cloudflare_email(anchor.attrs.get("data-cfemail"))
    if looks_like_email(decoded):
        return decoded
    return None
