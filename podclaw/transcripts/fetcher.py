"""Transcript fetcher - runs the configured transcript strategies as a fallback chain"""

from typing import Dict, List, Optional

import aiohttp

from . import TranscriptStrategy
from .innertube import InnertubeStrategy
from .transcriber import SpeechToTextStrategy
from .transcript_apis import ProxyTranscriptStrategy
from .youtube_transcript import CaptionClientSession, CaptionsStrategy
from ..config import TRANSCRIPT_STRATEGIES
from ..exceptions import InvalidInput, NotFound, PodclawError, UpstreamUnavailable
from ..fetchers.link_classifier import classify, is_video_id
from ..models import SourceKind, Transcript
from ..utils.logging import get_logger

logger = get_logger(__name__)

INVALID_VIDEO_MESSAGE = 'Invalid YouTube URL or video ID.'


def extract_video_id(value: str) -> str:
    """Video ID from a bare ID or any supported YouTube URL"""
    reference = classify(value)
    if reference.kind != SourceKind.YOUTUBE or not is_video_id(reference.canonical_id or ''):
        raise InvalidInput(INVALID_VIDEO_MESSAGE)
    return reference.canonical_id


def build_strategies(session: aiohttp.ClientSession,
                     caption_session: Optional[CaptionClientSession] = None,
                     order: Optional[List[str]] = None) -> List[TranscriptStrategy]:
    """Instantiate strategies in the configured order, ignoring unknown names"""
    available: Dict[str, TranscriptStrategy] = {
        "captions": CaptionsStrategy(caption_session),
        "proxy": ProxyTranscriptStrategy(session),
        "innertube": InnertubeStrategy(session),
        "speech_to_text": SpeechToTextStrategy(session),
    }

    strategies = []
    for name in order if order is not None else TRANSCRIPT_STRATEGIES:
        if name not in available:
            logger.warning(f"⚠️  Unknown transcript strategy '{name}' in configuration")
            continue
        strategies.append(available[name])
    return strategies


class TranscriptFetcher:
    """Try each transcript strategy until one returns a non-empty transcript"""

    def __init__(self, session: aiohttp.ClientSession,
                 caption_session: Optional[CaptionClientSession] = None,
                 strategies: Optional[List[TranscriptStrategy]] = None):
        self.session = session
        if strategies is None:
            strategies = build_strategies(session, caption_session)
        self.strategies = strategies

    async def fetch(self, url_or_id: str) -> Transcript:
        """Fetch a normalized transcript for a YouTube URL or video ID"""
        if not url_or_id or not url_or_id.strip():
            raise InvalidInput('Missing YouTube URL or video ID.')

        video_id = extract_video_id(url_or_id)
        strategies = [strategy for strategy in self.strategies if strategy.is_available()]
        if not strategies:
            raise UpstreamUnavailable('No transcript source is configured.')

        logger.info(f"📋 Transcript strategy order for {video_id}: {' → '.join(s.name for s in strategies)}")

        last_error: Optional[PodclawError] = None
        for i, strategy in enumerate(strategies):
            logger.info(f"📡 Attempt {i + 1}/{len(strategies)}: {strategy.name}")
            try:
                transcript = await strategy.fetch(video_id)
            except InvalidInput:
                raise
            except PodclawError as e:
                logger.warning(f"❌ {strategy.name} failed: {e.message}")
                last_error = e
                continue

            if not transcript.segments:
                logger.warning(f"❌ {strategy.name} returned an empty transcript")
                last_error = NotFound('No captions are available for this video.')
                continue

            if transcript.video_id is None:
                transcript.video_id = video_id
            logger.info(f"✅ SUCCESS with {strategy.name}: {len(transcript.segments)} segments, "
                        f"{transcript.total_duration_label}")
            return transcript

        logger.error(f"💀 All {len(strategies)} transcript strategies failed for {video_id}")
        raise last_error
