"""Caption-client strategy backed by youtube-transcript-api"""

import asyncio
import threading
from typing import Callable, List, Optional

import requests
from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api._errors import (
    AgeRestricted,
    CouldNotRetrieveTranscript,
    InvalidVideoId,
    IpBlocked,
    NoTranscriptFound,
    PoTokenRequired,
    RequestBlocked,
    TranscriptsDisabled,
    VideoUnavailable,
    VideoUnplayable,
    YouTubeRequestFailed,
)

from . import TranscriptStrategy
from .normalizer import from_snippets
from .track_selection import select_track
from ..exceptions import InvalidInput, NotFound, RateLimited, UpstreamUnavailable
from ..models import CaptionTrack, Transcript
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Android app profile; the plain browser profile trips bot detection far more often
CLIENT_USER_AGENT = 'com.google.android.youtube/19.29.37 (Linux; U; Android 14) gzip'

# Errors after which the client (and its cookies/session) must not be reused
POISONING_ERRORS = (RequestBlocked, IpBlocked, PoTokenRequired, YouTubeRequestFailed)


def build_caption_client() -> YouTubeTranscriptApi:
    """Create a caption client on a fresh requests session with a non-browser profile"""
    http_client = requests.Session()
    http_client.headers.update({
        'User-Agent': CLIENT_USER_AGENT,
        'Accept-Language': 'en-US,en;q=0.9',
    })
    return YouTubeTranscriptApi(http_client=http_client)


class CaptionClientSession:
    """Single lazily created caption client that is replaced once it gets poisoned.

    Creation and invalidation are guarded by a lock. ``invalidate`` only clears the slot
    if it still holds the client that failed, so two requests that fail on the same
    client at once do not throw away a replacement created in between.
    """

    def __init__(self, factory: Callable[[], YouTubeTranscriptApi] = build_caption_client):
        self._factory = factory
        self._client: Optional[YouTubeTranscriptApi] = None
        self._lock = threading.Lock()

    def get(self) -> YouTubeTranscriptApi:
        with self._lock:
            if self._client is None:
                logger.debug("Creating new caption client session")
                self._client = self._factory()
            return self._client

    def invalidate(self, client: YouTubeTranscriptApi) -> None:
        with self._lock:
            if self._client is client:
                logger.info("♻️  Discarding poisoned caption client session")
                self._client = None

    @property
    def active(self) -> bool:
        return self._client is not None


class CaptionsStrategy(TranscriptStrategy):
    """Fetch captions through youtube-transcript-api"""

    def __init__(self, client_session: Optional[CaptionClientSession] = None):
        self.client_session = client_session or CaptionClientSession()

    @property
    def name(self) -> str:
        return "captions"

    async def fetch(self, video_id: str) -> Transcript:
        client = self.client_session.get()
        loop = asyncio.get_running_loop()
        try:
            snippets, language = await loop.run_in_executor(None, self._fetch_sync, client, video_id)
        except POISONING_ERRORS as e:
            self.client_session.invalidate(client)
            raise RateLimited('YouTube blocked the caption request. Try again later.', str(e))
        except InvalidVideoId as e:
            raise InvalidInput('Invalid YouTube video ID.', str(e))
        except (TranscriptsDisabled, NoTranscriptFound) as e:
            raise NotFound('No captions are available for this video.', str(e))
        except AgeRestricted as e:
            raise NotFound('Age-restricted videos are not supported.', str(e))
        except (VideoUnavailable, VideoUnplayable) as e:
            raise NotFound('Video is unavailable or private.', str(e))
        except CouldNotRetrieveTranscript as e:
            raise UpstreamUnavailable('Could not retrieve captions.', str(e))
        except requests.RequestException as e:
            self.client_session.invalidate(client)
            raise UpstreamUnavailable('Caption request failed.', str(e))

        logger.info(f"✅ Caption client returned {len(snippets)} snippets ({language})")
        return from_snippets(snippets, video_id=video_id, source=self.name)

    def _fetch_sync(self, client: YouTubeTranscriptApi, video_id: str):
        transcript_list = client.list(video_id)
        tracks: List[CaptionTrack] = [
            CaptionTrack(
                language_code=transcript.language_code,
                is_generated=transcript.is_generated,
                name=transcript.language,
                handle=transcript,
            )
            for transcript in transcript_list
        ]

        track = select_track(tracks)
        if track is None:
            raise NotFound('No captions are available for this video.')

        fetched = track.handle.fetch()
        return list(fetched), track.language_code
