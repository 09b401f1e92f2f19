"""Link router - dispatches a pasted link to the resolver that can handle it"""

from typing import List, Optional

import aiohttp

from . import SourceResolver
from .apple_resolver import AppleResolver
from .direct_resolver import DirectAudioResolver
from .itunes_catalog import ItunesCatalog
from .link_classifier import classify
from .rss_resolver import RSSResolver
from .spotify_resolver import SpotifyResolver
from ..exceptions import InvalidInput, NotFound, PodclawError
from ..models import EpisodeDescriptor, LinkReference, SourceKind
from ..utils.logging import get_logger

logger = get_logger(__name__)

UNRECOGNIZED_MESSAGE = 'Unrecognized link. Paste a Spotify, Apple Podcasts, or RSS podcast link.'


class LinkRouter:
    """Route a link to the right resolver.

    Precedence: explicit host matches (Apple, Spotify) beat extension sniffing
    (direct audio, RSS), which beats treating unknown input as an RSS feed.
    """

    def __init__(self, session: aiohttp.ClientSession, episode_index: int = 0,
                 resolvers: Optional[List[SourceResolver]] = None):
        self.session = session
        catalog = ItunesCatalog(session)
        self.rss_resolver = RSSResolver(session, episode_index=episode_index)
        self.resolvers = resolvers or [
            AppleResolver(session, catalog),
            SpotifyResolver(session, catalog),
            DirectAudioResolver(session),
            self.rss_resolver,
        ]

    def _select(self, reference: LinkReference) -> Optional[SourceResolver]:
        for resolver in self.resolvers:
            if resolver.can_handle(reference):
                return resolver
        return None

    async def resolve(self, url: str) -> EpisodeDescriptor:
        """Resolve any supported link to an episode descriptor"""
        if not url or not url.strip():
            raise InvalidInput('Missing "url" in request body.')

        reference = classify(url)
        logger.info(f"🔗 Classified link as {reference.kind.value}: {reference.raw_input[:80]}")

        if reference.kind == SourceKind.YOUTUBE:
            raise InvalidInput('YouTube links are handled by the transcript endpoint.')

        if reference.kind == SourceKind.UNKNOWN:
            descriptor = await self._resolve_unknown(reference)
        else:
            resolver = self._select(reference)
            if resolver is None:
                raise InvalidInput(UNRECOGNIZED_MESSAGE)
            logger.info(f"📋 Using {resolver.name} resolver")
            descriptor = await resolver.resolve(reference)

        if not descriptor.audio_url:
            raise NotFound('Could not find an audio file for this episode.')

        logger.info(f"✅ Resolved: {descriptor.show} - {descriptor.title[:80]}")
        return descriptor

    async def _resolve_unknown(self, reference: LinkReference) -> EpisodeDescriptor:
        """Last resort: maybe it is a feed without a telltale extension"""
        if not reference.raw_input.lower().startswith(('http://', 'https://')):
            raise InvalidInput(UNRECOGNIZED_MESSAGE)

        try:
            return await self.rss_resolver.resolve(reference)
        except PodclawError as e:
            logger.info(f"⚠️  RSS attempt for unknown link failed: {e.message}")
            raise InvalidInput(UNRECOGNIZED_MESSAGE)
