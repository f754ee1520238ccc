"""Media link parsing and classification."""

from __future__ import annotations

from .config import MEDIA_HOSTS, MEDIA_KIND_LABELS
from .models import MediaLink


def classify_media_link(url: str) -> str:
    """Return the media kind for a URL based on its host.

    >>> classify_media_link("https://youtu.be/abc")
    'youtube'
    >>> classify_media_link("https://example.com/x.png")
    'generic'
    """
    lowered = url.lower()
    for fragment, kind in MEDIA_HOSTS:
        if fragment in lowered:
            return kind
    return "generic"


def parse_media_links(text: str | None) -> list[MediaLink]:
    """Split raw form text (one URL per line) into classified links."""
    if not text or not text.strip():
        return []
    links: list[MediaLink] = []
    for line in text.splitlines():
        url = line.strip()
        if not url:
            continue
        links.append(MediaLink(url=url, kind=classify_media_link(url)))
    return links


def media_links_to_text(links: list[MediaLink]) -> str:
    return "\n".join(link.url for link in links)


def media_label(link: MediaLink) -> str:
    if link.kind == "generic":
        return link.url
    return MEDIA_KIND_LABELS.get(link.kind, link.url)
