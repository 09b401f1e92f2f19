"""Fuzzy episode title matching between the catalog and RSS feeds.

The catalog and the feeds format titles inconsistently (prefixes, suffixes, truncation),
so matches are substring containment checks on lower-cased titles with long titles cut
to a 30 character key. The heuristic is approximate on purpose; changing it changes
which episode gets picked.
"""

from typing import List, Optional

from ..models import FeedEpisodeEntry

MATCH_KEY_LENGTH = 30


def match_catalog_title(entries: List[FeedEpisodeEntry], catalog_title: str) -> Optional[FeedEpisodeEntry]:
    """Match in both directions: feed title contains the catalog title, or the catalog
    title contains the first 30 characters of a feed title."""
    search_title = (catalog_title or '').lower()
    if not search_title:
        return None

    for entry in entries:
        if search_title in entry.title.lower():
            return entry

    for entry in entries:
        if entry.title.lower()[:MATCH_KEY_LENGTH] in search_title:
            return entry

    return None


def match_title_prefix(entries: List[FeedEpisodeEntry], title: str) -> Optional[FeedEpisodeEntry]:
    """Find the first entry whose title contains the first 30 characters of ``title``"""
    key = (title or '').lower()[:MATCH_KEY_LENGTH]
    if not key:
        return None

    for entry in entries:
        if key in entry.title.lower():
            return entry

    return None
