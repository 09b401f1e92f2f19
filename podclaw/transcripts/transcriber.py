"""Speech-to-text strategy: download the video's audio and transcribe it with Whisper"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import aiohttp
import openai
import yt_dlp
from openai import AsyncOpenAI

from . import TranscriptStrategy
from .normalizer import build_transcript, from_speech_segments
from ..config import (
    AUDIO_DOWNLOAD_TIMEOUT_SECONDS,
    GROQ_API_KEY,
    MAX_AUDIO_BYTES,
    STT_BASE_URL,
    STT_LANGUAGE,
    STT_MODEL,
    STT_TIMEOUT_SECONDS,
)
from ..exceptions import AudioTooLarge, AuthError, NotFound, RateLimited, UpstreamUnavailable
from ..models import Transcript
from ..utils.logging import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


def select_audio_format(formats: Optional[List[Dict]]) -> Optional[Dict]:
    """Pick the lowest-bitrate audio-only format to keep the upload small"""
    audio_only = [
        fmt for fmt in formats or []
        if fmt.get('url')
        and fmt.get('vcodec') == 'none'
        and fmt.get('acodec') not in (None, 'none')
    ]
    if not audio_only:
        return None

    def bitrate(fmt: Dict) -> float:
        return fmt.get('abr') or fmt.get('tbr') or float('inf')

    return min(audio_only, key=bitrate)


def _megabytes(size: int) -> float:
    return size / 1024 / 1024


class SpeechToTextStrategy(TranscriptStrategy):
    """Last resort when a video has no captions at all.

    The transcription API rejects uploads above 25 MB, so the size is checked against
    what yt-dlp reports before downloading, and again while streaming. Oversized audio
    fails with ``AudioTooLarge``; nothing is trimmed or transcoded.
    """

    def __init__(self, session: aiohttp.ClientSession, api_key: Optional[str] = GROQ_API_KEY,
                 base_url: str = STT_BASE_URL, model: str = STT_MODEL, language: str = STT_LANGUAGE,
                 max_bytes: int = MAX_AUDIO_BYTES, client: Optional[AsyncOpenAI] = None):
        self.session = session
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.language = language
        self.max_bytes = max_bytes
        self._client = client

    @property
    def name(self) -> str:
        return "speech_to_text"

    def is_available(self) -> bool:
        return bool(self.api_key) or self._client is not None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=STT_TIMEOUT_SECONDS,
                max_retries=0  # failures surface to the caller, no silent retries
            )
        return self._client

    async def fetch(self, video_id: str) -> Transcript:
        url = f"https://www.youtube.com/watch?v={video_id}"
        logger.info(f"⬇️  Downloading audio for: {video_id}")

        loop = asyncio.get_running_loop()
        info = await loop.run_in_executor(None, self._extract_info, url)

        fmt = select_audio_format(info.get('formats'))
        if fmt is None:
            raise NotFound('No audio format available for this video.')

        logger.info(f"🎧 Format: {fmt.get('ext')} ({fmt.get('acodec')}), bitrate: {fmt.get('abr')}kbps")

        reported = fmt.get('filesize') or fmt.get('filesize_approx')
        if reported and reported > self.max_bytes:
            raise self._too_large(reported)

        audio = await self._download(fmt)
        logger.info(f"📦 Audio downloaded: {_megabytes(len(audio)):.1f}MB")

        response = await self._transcribe(audio, fmt)
        title = info.get('title')

        segments = getattr(response, 'segments', None)
        if segments:
            return from_speech_segments(segments, video_id=video_id, title=title, source=self.name)

        # No segment timing; keep the whole text as one line
        text = getattr(response, 'text', '') or ''
        duration = float(info.get('duration') or 0)
        return build_transcript([(text, 0.0, duration)], video_id=video_id, title=title, source=self.name)

    def _too_large(self, size: int) -> AudioTooLarge:
        return AudioTooLarge(
            f"Audio is {_megabytes(size):.1f}MB, over the {_megabytes(self.max_bytes):.0f}MB transcription limit. "
            "Try a shorter video (under ~2 hours)."
        )

    def _extract_info(self, url: str) -> Dict[str, Any]:
        """Blocking yt-dlp metadata extraction; run in an executor"""
        ydl_opts = {
            'quiet': True,
            'no_warnings': True,
            'noplaylist': True,
            'skip_download': True,
        }
        try:
            with yt_dlp.YoutubeDL(ydl_opts) as ydl:
                info = ydl.extract_info(url, download=False)
        except yt_dlp.utils.DownloadError as e:
            raise self._map_download_error(str(e))

        if not info:
            raise UpstreamUnavailable('Could not read video information.')
        return info

    @staticmethod
    def _map_download_error(message: str) -> Exception:
        lowered = message.lower()
        if 'not a bot' in lowered:
            return RateLimited('YouTube requested sign-in to confirm this is not a bot.', message)
        if 'confirm your age' in lowered or 'age-restricted' in lowered or 'age restricted' in lowered:
            return NotFound('Age-restricted videos are not supported.', message)
        if 'private video' in lowered or 'video unavailable' in lowered:
            return NotFound('Video is unavailable or private.', message)
        if 'sign in' in lowered:
            return NotFound('This video requires sign-in. Try a different video.', message)
        return UpstreamUnavailable('Failed to download audio.', message)

    async def _download(self, fmt: Dict) -> bytes:
        """Stream the audio into memory, aborting as soon as it passes the size limit"""
        chunks = []
        total = 0
        try:
            async with self.session.get(
                fmt['url'],
                headers=fmt.get('http_headers') or {},
                timeout=aiohttp.ClientTimeout(total=AUDIO_DOWNLOAD_TIMEOUT_SECONDS)
            ) as response:
                if response.status != 200:
                    raise UpstreamUnavailable(f"Audio download returned {response.status}")

                declared = response.content_length
                if declared and declared > self.max_bytes:
                    raise self._too_large(declared)

                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    total += len(chunk)
                    if total > self.max_bytes:
                        raise self._too_large(total)
                    chunks.append(chunk)
        except asyncio.TimeoutError:
            raise UpstreamUnavailable('Audio download timed out.')
        except aiohttp.ClientError as e:
            raise UpstreamUnavailable('Audio download failed.', str(e))

        return b''.join(chunks)

    async def _transcribe(self, audio: bytes, fmt: Dict):
        ext, mime = self._file_type(fmt)
        logger.info(f"🎤 Sending {_megabytes(len(audio)):.1f}MB to {self.model}...")
        try:
            response = await self._get_client().audio.transcriptions.create(
                model=self.model,
                file=(f"audio.{ext}", audio, mime),
                response_format='verbose_json',
                language=self.language,
            )
        except openai.AuthenticationError as e:
            raise AuthError('Speech-to-text API key is invalid.', str(e))
        except openai.RateLimitError as e:
            raise RateLimited('Speech-to-text rate limit reached. Try again later.', str(e))
        except openai.APIError as e:
            raise UpstreamUnavailable('Whisper transcription failed.', str(e))

        logger.info("✅ Transcription complete!")
        return response

    @staticmethod
    def _file_type(fmt: Dict) -> Tuple[str, str]:
        ext = fmt.get('ext') or 'webm'
        if ext == 'm4a':
            return ext, 'audio/mp4'
        return ext, f"audio/{ext}"
