"""Direct audio resolver - the link already points at an audio file"""

import asyncio

import aiohttp

from . import SourceResolver
from ..exceptions import UpstreamUnavailable
from ..models import EpisodeDescriptor, LinkReference, SourceKind
from ..utils.helpers import filename_title
from ..utils.logging import get_logger

logger = get_logger(__name__)


class DirectAudioResolver(SourceResolver):
    """Validate reachability with a HEAD request; no metadata source exists"""

    @property
    def name(self) -> str:
        return "direct_audio"

    def can_handle(self, reference: LinkReference) -> bool:
        return reference.kind == SourceKind.DIRECT_AUDIO

    async def _is_reachable(self, url: str) -> bool:
        try:
            async with self.session.head(url, allow_redirects=True) as response:
                return 200 <= response.status < 300
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"HEAD {url[:80]} failed: {e}")
            return False

    async def resolve(self, reference: LinkReference) -> EpisodeDescriptor:
        url = reference.canonical_id or reference.raw_input
        logger.info(f"📡 Checking direct audio URL: {url[:80]}")

        if not await self._is_reachable(url):
            raise UpstreamUnavailable('Audio URL is not accessible.')

        return EpisodeDescriptor(
            audio_url=url,
            title=filename_title(url),
            show='Unknown Podcast',
            artwork='',
            duration_seconds=0,
            source_kind=SourceKind.DIRECT_AUDIO,
        )
