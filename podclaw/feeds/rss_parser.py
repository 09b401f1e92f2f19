"""Podcast feed parsing on top of feedparser.

feedparser handles RSS and Atom alike and is lenient with the malformed,
non-namespaced feeds found in the wild: problems are flagged through ``bozo``
instead of raised, so a sloppy feed still yields whatever entries it has.
"""

import asyncio
import io
from typing import List, Optional, Union

import aiohttp
import feedparser

from ..config import FEED_USER_AGENT, MAX_FEED_EPISODES
from ..exceptions import NotFound
from ..models import FeedEpisodeEntry
from ..utils.helpers import parse_duration
from ..utils.http import fetch_bytes
from ..utils.logging import get_logger

logger = get_logger(__name__)

FEED_ACCEPT = 'application/rss+xml, application/atom+xml, application/xml, text/xml, */*'

__all__ = ['extract_audio_url', 'fetch_feed_episodes', 'parse_duration', 'parse_feed']


def extract_audio_url(entry) -> Optional[str]:
    """Enclosure URL of an entry: RSS ``<enclosure>``, Atom ``rel="enclosure"`` or media content"""
    for enclosure in entry.get('enclosures') or []:
        href = enclosure.get('href') or enclosure.get('url')
        if href:
            return href.strip()

    for link in entry.get('links') or []:
        if link.get('rel') == 'enclosure' and link.get('href'):
            return link['href'].strip()

    for media in entry.get('media_content') or []:
        if media.get('type', '').startswith('audio/') and media.get('url'):
            return media['url'].strip()

    return None


def _image_href(image) -> str:
    if not image:
        return ''
    return (image.get('href') or image.get('url') or '').strip()


def parse_feed(content: Union[str, bytes], limit: int = MAX_FEED_EPISODES) -> List[FeedEpisodeEntry]:
    """Parse feed content into episode entries, in feed order.

    At most ``limit`` entries are examined. Entries without an enclosure URL are
    dropped because there is nothing to play.
    """
    if not content:
        return []
    if isinstance(content, str):
        content = content.encode('utf-8')

    # A stream keeps feedparser from treating the document as a URL or file path
    feed = feedparser.parse(io.BytesIO(content))
    if feed.get('bozo'):
        logger.debug(f"Feed is not well-formed, parsed leniently: {feed.get('bozo_exception')}")

    channel = feed.get('feed') or {}
    show_title = (channel.get('title') or '').strip() or 'Unknown Podcast'
    show_artwork = _image_href(channel.get('image')) or (channel.get('logo') or '').strip()

    episodes = []
    for entry in (feed.get('entries') or [])[:limit]:
        mp3_url = extract_audio_url(entry)
        if not mp3_url:
            continue
        episodes.append(FeedEpisodeEntry(
            title=(entry.get('title') or '').strip() or 'Untitled',
            mp3_url=mp3_url,
            artwork=_image_href(entry.get('image')) or show_artwork,
            duration_seconds=parse_duration(entry.get('itunes_duration')),
            show_title=show_title,
        ))

    return episodes


async def fetch_feed_episodes(session: aiohttp.ClientSession, feed_url: str) -> List[FeedEpisodeEntry]:
    """Download and parse a feed; raise when it is unreachable or has no playable items"""
    logger.info(f"📡 Fetching RSS feed: {feed_url[:80]}")
    content = await fetch_bytes(
        session,
        feed_url,
        'RSS feed',
        headers={'User-Agent': FEED_USER_AGENT, 'Accept': FEED_ACCEPT}
    )

    # feedparser is synchronous; keep large feeds off the event loop
    loop = asyncio.get_running_loop()
    episodes = await loop.run_in_executor(None, parse_feed, content)
    if not episodes:
        raise NotFound('No episodes found in RSS feed.')

    logger.info(f"✅ Parsed {len(episodes)} episodes from feed")
    return episodes
