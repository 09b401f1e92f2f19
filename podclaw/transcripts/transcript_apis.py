"""
Third-party transcript proxy integration.
The proxy takes care of YouTube's anti-bot measures; we pay per request instead.
"""

from typing import Dict, List, Optional

import aiohttp

from . import TranscriptStrategy
from .normalizer import from_proxy_segments
from ..config import TRANSCRIPT_PROXY_API_KEY, TRANSCRIPT_PROXY_BASE_URL
from ..exceptions import NotFound, UpstreamUnavailable
from ..models import Transcript
from ..utils.http import fetch_json
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ProxyTranscriptStrategy(TranscriptStrategy):
    """Fetch a timestamped transcript from the metered transcript proxy API"""

    SERVICE = 'Transcript proxy'

    def __init__(self, session: aiohttp.ClientSession, api_key: Optional[str] = TRANSCRIPT_PROXY_API_KEY,
                 base_url: str = TRANSCRIPT_PROXY_BASE_URL):
        self.session = session
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')

    @property
    def name(self) -> str:
        return "proxy"

    def is_available(self) -> bool:
        return bool(self.api_key)

    async def fetch(self, video_id: str) -> Transcript:
        logger.info(f"🌐 Requesting transcript for {video_id} from proxy")
        data = await fetch_json(
            self.session,
            f"{self.base_url}/youtube/transcript",
            self.SERVICE,
            params={'videoId': video_id},
            headers={'x-api-key': self.api_key, 'Accept': 'application/json'},
            credentialed=True,
            not_found_message='No captions are available for this video.'
        )

        segments = self._extract_segments(data)
        if not segments:
            raise NotFound('No captions are available for this video.')

        return from_proxy_segments(segments, video_id=video_id, source=self.name)

    def _extract_segments(self, data) -> List[Dict]:
        """The proxy answers ``{"content": [{text, offset, duration}, ...], "lang": ...}``"""
        if not isinstance(data, dict):
            raise UpstreamUnavailable(f"{self.SERVICE} returned a malformed response.", str(data))

        content = data.get('content')
        if isinstance(content, str):
            # Plain-text mode; no timing information available
            return [{'text': content, 'offset': 0, 'duration': 0}] if content.strip() else []
        if not isinstance(content, list):
            raise UpstreamUnavailable(f"{self.SERVICE} returned a malformed response.", str(data))

        return [item for item in content if isinstance(item, dict)]
