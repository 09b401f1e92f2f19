"""Spotify resolver - oEmbed metadata plus an Apple catalog search"""

from typing import Dict, Optional

from . import SourceResolver
from .itunes_catalog import ItunesCatalog, millis_to_seconds
from .title_matching import match_title_prefix
from ..config import SPOTIFY_OEMBED_URL
from ..exceptions import NotFound, UpstreamUnavailable
from ..feeds.rss_parser import fetch_feed_episodes
from ..models import EpisodeDescriptor, LinkReference, SourceKind
from ..utils.http import fetch_json
from ..utils.logging import get_logger

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "Could not find this episode's audio. Try pasting the Apple Podcasts or RSS link instead."


class SpotifyResolver(SourceResolver):
    """Resolve open.spotify.com episode links.

    Spotify does not expose audio or a stable public ID, so the episode title from
    oEmbed is used to find the same episode in the Apple catalog.
    """

    def __init__(self, session, catalog: Optional[ItunesCatalog] = None):
        super().__init__(session)
        self.catalog = catalog or ItunesCatalog(session)

    @property
    def name(self) -> str:
        return "spotify"

    def can_handle(self, reference: LinkReference) -> bool:
        return reference.kind == SourceKind.SPOTIFY

    async def _fetch_oembed(self, url: str) -> Dict:
        try:
            data = await fetch_json(self.session, SPOTIFY_OEMBED_URL, 'Spotify oEmbed', params={'url': url})
        except UpstreamUnavailable as e:
            raise UpstreamUnavailable('Could not fetch Spotify episode info.', e.details or e.message)
        return data if isinstance(data, dict) else {}

    async def resolve(self, reference: LinkReference) -> EpisodeDescriptor:
        spotify_url = reference.canonical_id or reference.raw_input
        oembed = await self._fetch_oembed(spotify_url)

        episode_title = oembed.get('title') or ''
        show_name = oembed.get('provider_name') or ''
        thumbnail = oembed.get('thumbnail_url') or ''
        logger.info(f"🎵 Spotify episode: {episode_title[:80]}")

        results = await self.catalog.search_episodes(episode_title)
        if not results:
            raise NotFound(NOT_FOUND_MESSAGE)

        match = results[0]
        show = match.get('collectionName') or show_name or 'Unknown Podcast'

        if match.get('episodeUrl'):
            logger.info("✅ Catalog search returned a direct episode URL")
            return EpisodeDescriptor(
                audio_url=match['episodeUrl'],
                title=match.get('trackName') or episode_title,
                show=show,
                artwork=match.get('artworkUrl600') or thumbnail,
                duration_seconds=millis_to_seconds(match.get('trackTimeMillis')),
                source_kind=SourceKind.SPOTIFY,
                spotify_url=spotify_url,
            )

        feed_url = match.get('feedUrl')
        if not feed_url:
            raise NotFound(NOT_FOUND_MESSAGE)

        try:
            episodes = await fetch_feed_episodes(self.session, feed_url)
        except NotFound:
            raise NotFound(NOT_FOUND_MESSAGE)

        episode = match_title_prefix(episodes, match.get('trackName') or episode_title) or episodes[0]

        return EpisodeDescriptor(
            audio_url=episode.mp3_url,
            title=episode.title,
            show=show,
            artwork=episode.artwork or thumbnail,
            duration_seconds=episode.duration_seconds,
            source_kind=SourceKind.SPOTIFY,
            spotify_url=spotify_url,
        )
