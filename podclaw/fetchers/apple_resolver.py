"""Apple Podcasts resolver - catalog lookup plus RSS feed matching"""

from typing import Dict, Optional

from . import SourceResolver
from .itunes_catalog import ItunesCatalog, millis_to_seconds
from .title_matching import match_catalog_title
from ..exceptions import InvalidInput, NotFound, PodclawError
from ..feeds.rss_parser import fetch_feed_episodes
from ..models import EpisodeDescriptor, LinkReference, SourceKind
from ..utils.logging import get_logger

logger = get_logger(__name__)


class AppleResolver(SourceResolver):
    """Resolve podcasts.apple.com links.

    Apple links look like ``/us/podcast/<slug>/id<podcast>?i=<episode>``. The podcast ID
    gives us the show's RSS feed; the optional episode ID lets us pick the right item.
    """

    def __init__(self, session, catalog: Optional[ItunesCatalog] = None):
        super().__init__(session)
        self.catalog = catalog or ItunesCatalog(session)

    @property
    def name(self) -> str:
        return "apple"

    def can_handle(self, reference: LinkReference) -> bool:
        return reference.kind == SourceKind.APPLE

    async def resolve(self, reference: LinkReference) -> EpisodeDescriptor:
        podcast_id = reference.canonical_id
        if not podcast_id:
            raise InvalidInput('Could not extract podcast ID from Apple Podcasts link.')

        logger.info(f"🍎 Looking up Apple podcast {podcast_id}")
        podcast = await self.catalog.lookup_podcast(podcast_id)
        if not podcast or not podcast.get('feedUrl'):
            raise NotFound('Could not find RSS feed for this podcast.')

        show = podcast.get('collectionName') or podcast.get('trackName') or 'Unknown Podcast'
        artwork = podcast.get('artworkUrl600') or podcast.get('artworkUrl100') or ''

        episode_info = None
        if reference.episode_id:
            episode_info = await self._lookup_episode(reference.episode_id)
            if episode_info and episode_info.get('episodeUrl'):
                # Apple handed us the audio directly, no need to read the feed
                logger.info("✅ Catalog returned a direct episode URL")
                return EpisodeDescriptor(
                    audio_url=episode_info['episodeUrl'],
                    title=episode_info.get('trackName') or 'Unknown Episode',
                    show=show,
                    artwork=episode_info.get('artworkUrl600') or artwork,
                    duration_seconds=millis_to_seconds(episode_info.get('trackTimeMillis')),
                    source_kind=SourceKind.APPLE,
                )

        episodes = await fetch_feed_episodes(self.session, podcast['feedUrl'])

        episode = None
        if episode_info and episode_info.get('trackName'):
            episode = match_catalog_title(episodes, episode_info['trackName'])
            if episode:
                logger.info(f"🎯 Matched episode: {episode.title[:80]}")
            else:
                logger.info("⚠️  No feed entry matched the catalog title, using latest episode")

        if episode is None:
            episode = episodes[0]

        return EpisodeDescriptor(
            audio_url=episode.mp3_url,
            title=episode.title,
            show=show,
            artwork=episode.artwork or artwork,
            duration_seconds=episode.duration_seconds,
            source_kind=SourceKind.APPLE,
        )

    async def _lookup_episode(self, episode_id: str) -> Optional[Dict]:
        """Episode lookup is best effort; the feed's latest item is an acceptable fallback"""
        try:
            return await self.catalog.lookup_episode(episode_id)
        except PodclawError as e:
            logger.warning(f"Episode lookup failed for {episode_id}: {e.message}")
            return None
