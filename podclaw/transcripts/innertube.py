"""Player-endpoint strategy: ask YouTube's internal API for caption tracks directly"""

from typing import Dict, List
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

import aiohttp

from . import TranscriptStrategy
from .normalizer import from_caption_events
from .track_selection import select_track
from ..config import INNERTUBE_CLIENT_VERSION, INNERTUBE_URL, USER_AGENT
from ..exceptions import NotFound, RateLimited, UpstreamUnavailable
from ..models import CaptionTrack, Transcript
from ..utils.http import fetch_json
from ..utils.logging import get_logger

logger = get_logger(__name__)


class InnertubeStrategy(TranscriptStrategy):
    """Mimic the web player: POST to /youtubei/v1/player, then fetch the JSON3 caption payload"""

    SERVICE = 'YouTube player endpoint'

    def __init__(self, session: aiohttp.ClientSession, player_url: str = INNERTUBE_URL,
                 client_version: str = INNERTUBE_CLIENT_VERSION):
        self.session = session
        self.player_url = player_url
        self.client_version = client_version

    @property
    def name(self) -> str:
        return "innertube"

    def _player_request(self, video_id: str) -> Dict:
        return {
            'context': {
                'client': {
                    'clientName': 'WEB',
                    'clientVersion': self.client_version,
                    'hl': 'en',
                    'gl': 'US',
                    'userAgent': USER_AGENT,
                }
            },
            'videoId': video_id,
        }

    async def fetch(self, video_id: str) -> Transcript:
        logger.info(f"🎬 Querying player endpoint for {video_id}")
        player = await fetch_json(
            self.session,
            self.player_url,
            self.SERVICE,
            method='POST',
            json=self._player_request(video_id),
            headers={
                'Content-Type': 'application/json',
                'Origin': 'https://www.youtube.com',
                'X-YouTube-Client-Name': '1',
                'X-YouTube-Client-Version': self.client_version,
            }
        )
        if not isinstance(player, dict):
            raise UpstreamUnavailable(f"{self.SERVICE} returned a malformed response.", str(player))

        self._check_playability(player)
        title = (player.get('videoDetails') or {}).get('title')

        track = select_track(self._caption_tracks(player))
        if track is None:
            raise NotFound('No captions are available for this video.')

        logger.info(f"📝 Selected caption track: {track.language_code}{' (auto)' if track.is_generated else ''}")
        payload = await fetch_json(self.session, self._json3_url(track.handle), 'YouTube captions')
        events = payload.get('events') if isinstance(payload, dict) else None
        if events is None:
            raise UpstreamUnavailable('YouTube captions returned a malformed response.', str(payload))

        return from_caption_events(events, video_id=video_id, title=title, source=self.name)

    def _check_playability(self, player: Dict):
        playability = player.get('playabilityStatus') or {}
        status = playability.get('status', 'OK')
        if status == 'OK':
            return

        reason = playability.get('reason') or status
        if status == 'LOGIN_REQUIRED':
            if 'bot' in reason.lower():
                raise RateLimited('YouTube requested sign-in to confirm this is not a bot.', reason)
            if 'age' in reason.lower():
                raise NotFound('Age-restricted videos are not supported.', reason)
            raise NotFound('Video is unavailable or private.', reason)
        if status in ('ERROR', 'UNPLAYABLE'):
            raise NotFound('Video is unavailable or private.', reason)
        raise UpstreamUnavailable(f"{self.SERVICE} reported status {status}.", reason)

    def _caption_tracks(self, player: Dict) -> List[CaptionTrack]:
        renderer = (player.get('captions') or {}).get('playerCaptionsTracklistRenderer') or {}
        tracks = []
        for raw in renderer.get('captionTracks') or []:
            if not raw.get('baseUrl'):
                continue
            tracks.append(CaptionTrack(
                language_code=raw.get('languageCode', ''),
                is_generated=raw.get('kind') == 'asr',
                name=_track_name(raw),
                handle=raw['baseUrl'],
            ))
        return tracks

    @staticmethod
    def _json3_url(base_url: str) -> str:
        parsed = urlparse(base_url)
        query = [(key, value) for key, value in parse_qsl(parsed.query, keep_blank_values=True) if key != 'fmt']
        query.append(('fmt', 'json3'))
        return urlunparse(parsed._replace(query=urlencode(query)))


def _track_name(raw: Dict) -> str:
    name = raw.get('name') or {}
    if 'simpleText' in name:
        return name['simpleText']
    runs: List[Dict] = name.get('runs') or []
    return ''.join(run.get('text', '') for run in runs)

