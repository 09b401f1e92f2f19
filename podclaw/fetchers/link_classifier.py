"""Classify arbitrary user input into a structured link reference.

Pure functions only: no I/O, and unrecognised input comes back as
``SourceKind.UNKNOWN`` instead of raising, so callers decide how to react.
"""

import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

from ..models import LinkReference, SourceKind

VIDEO_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{11}$')
AUDIO_EXTENSION = re.compile(r'\.(mp3|m4a|ogg|wav|aac)$', re.IGNORECASE)
FEED_EXTENSION = re.compile(r'\.(xml|rss)$', re.IGNORECASE)
APPLE_PODCAST_ID = re.compile(r'/id(\d+)')


def is_video_id(value: str) -> bool:
    """True for an 11-character token of letters, digits, '-' and '_'"""
    return bool(VIDEO_ID_PATTERN.match(value or ''))


def _is_youtube_host(host: str) -> bool:
    return host == 'youtu.be' or host == 'youtube.com' or host.endswith('.youtube.com')


def extract_youtube_id(url: str) -> Optional[str]:
    """Pull the video ID out of watch, youtu.be, embed and shorts URLs"""
    parsed = urlparse(url)
    host = (parsed.hostname or '').lower()
    segments = [segment for segment in parsed.path.split('/') if segment]

    if host == 'youtu.be':
        return segments[0] if segments else None

    video_ids = parse_qs(parsed.query).get('v')
    if video_ids and video_ids[0]:
        return video_ids[0]

    for marker in ('embed', 'shorts'):
        if marker in segments:
            index = segments.index(marker)
            if index + 1 < len(segments):
                return segments[index + 1]

    return None


def _query_has_audio_file(query: str) -> bool:
    return any(
        AUDIO_EXTENSION.search(value)
        for values in parse_qs(query).values()
        for value in values
    )


def classify(raw_input: str) -> LinkReference:
    """Work out what kind of link ``raw_input`` is and extract its identifiers"""
    value = (raw_input or '').strip()

    if is_video_id(value):
        return LinkReference(SourceKind.YOUTUBE, value, canonical_id=value)

    try:
        parsed = urlparse(value)
        host = (parsed.hostname or '').lower() if parsed.netloc else ''
    except ValueError:
        return LinkReference(SourceKind.UNKNOWN, value)

    if parsed.scheme.lower() not in ('http', 'https') or not host:
        return LinkReference(SourceKind.UNKNOWN, value)

    path = parsed.path or ''

    if 'podcasts.apple.com' in host:
        podcast_id = APPLE_PODCAST_ID.search(path)
        episode_ids = parse_qs(parsed.query).get('i')
        episode_id = episode_ids[0] if episode_ids and episode_ids[0].isdigit() else None
        return LinkReference(
            SourceKind.APPLE,
            value,
            canonical_id=podcast_id.group(1) if podcast_id else None,
            episode_id=episode_id,
        )

    if 'open.spotify.com' in host:
        return LinkReference(SourceKind.SPOTIFY, value, canonical_id=value)

    if _is_youtube_host(host) or '/embed/' in path or '/shorts/' in path:
        return LinkReference(SourceKind.YOUTUBE, value, canonical_id=extract_youtube_id(value))

    if AUDIO_EXTENSION.search(path) or _query_has_audio_file(parsed.query):
        return LinkReference(SourceKind.DIRECT_AUDIO, value, canonical_id=value)

    if FEED_EXTENSION.search(path) or '/feed' in path:
        return LinkReference(SourceKind.RSS, value, canonical_id=value)

    return LinkReference(SourceKind.UNKNOWN, value)
