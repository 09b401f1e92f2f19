"""Client for the public iTunes lookup and search API"""

from typing import Dict, List, Optional

import aiohttp

from ..config import CATALOG_SEARCH_LIMIT, ITUNES_BASE_URL
from ..utils.http import fetch_json
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ItunesCatalog:
    """Thin wrapper over itunes.apple.com; no API key required"""

    SERVICE = 'Apple Podcasts catalog'

    def __init__(self, session: aiohttp.ClientSession, base_url: str = ITUNES_BASE_URL):
        self.session = session
        self.base_url = base_url.rstrip('/')

    async def _get(self, path: str, params: Dict[str, str]) -> List[Dict]:
        data = await fetch_json(
            self.session,
            f"{self.base_url}/{path}",
            self.SERVICE,
            params=params,
            headers={'Accept': 'application/json'}
        )
        if not isinstance(data, dict):
            return []
        return [item for item in data.get('results') or [] if isinstance(item, dict)]

    async def lookup_podcast(self, podcast_id: str) -> Optional[Dict]:
        """Podcast-level metadata (feedUrl, collectionName, artwork) by numeric ID"""
        results = await self._get('lookup', {'id': podcast_id, 'entity': 'podcast'})
        return results[0] if results else None

    async def lookup_episode(self, episode_id: str) -> Optional[Dict]:
        """Episode-level metadata (trackName, episodeUrl) by numeric ID"""
        results = await self._get('lookup', {'id': episode_id})
        return results[0] if results else None

    async def search_episodes(self, term: str, limit: int = CATALOG_SEARCH_LIMIT) -> List[Dict]:
        """Search podcast episodes by free text"""
        results = await self._get('search', {
            'term': term,
            'media': 'podcast',
            'entity': 'podcastEpisode',
            'limit': str(limit),
        })
        logger.debug(f"Catalog search for '{term[:60]}' returned {len(results)} results")
        return results


def millis_to_seconds(value) -> int:
    """Convert a catalog ``trackTimeMillis`` value to whole seconds"""
    try:
        return int(value) // 1000 if value else 0
    except (TypeError, ValueError):
        return 0
