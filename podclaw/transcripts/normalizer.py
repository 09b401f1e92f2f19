"""Normalize caption events, proxy segments and speech-to-text output into one Transcript"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..models import Transcript, TranscriptSegment
from ..utils.helpers import ceil_seconds, format_timestamp

RawSegment = Tuple[str, float, float]


def _clean(text: Any) -> str:
    return ' '.join(str(text or '').replace('\n', ' ').split())


def render_plain_text(segments: Iterable[TranscriptSegment]) -> str:
    """One ``[timestamp] text`` line per segment"""
    return '\n'.join(f"[{format_timestamp(segment.start_seconds)}] {segment.text}" for segment in segments)


def build_transcript(raw_segments: Iterable[RawSegment], video_id: Optional[str] = None,
                     title: Optional[str] = None, source: Optional[str] = None) -> Transcript:
    """Build a Transcript from (text, start_seconds, duration_seconds) tuples.

    Empty lines are dropped and segments are stably ordered by start time.
    """
    segments = []
    for text, start, duration in raw_segments:
        text = _clean(text)
        if not text:
            continue
        start = max(0.0, float(start or 0))
        segments.append(TranscriptSegment(
            text=text,
            start_seconds=start,
            duration_seconds=max(0.0, float(duration or 0)),
            timestamp_label=format_timestamp(start),
        ))

    segments.sort(key=lambda segment: segment.start_seconds)

    if segments:
        last = segments[-1]
        total = ceil_seconds(last.start_seconds + last.duration_seconds)
    else:
        total = 0

    return Transcript(
        segments=segments,
        plain_text=render_plain_text(segments),
        total_duration_label=format_timestamp(total),
        video_id=video_id,
        title=title,
        source=source,
    )


def caption_event_segments(events: Iterable[Dict]) -> List[RawSegment]:
    """Flatten JSON3 caption events: join each event's ``segs`` into one line"""
    raw = []
    for event in events or []:
        segs = event.get('segs')
        if not segs:
            continue
        text = _clean(''.join(seg.get('utf8', '') for seg in segs))
        if not text:
            continue
        raw.append((
            text,
            float(event.get('tStartMs', 0)) / 1000.0,
            float(event.get('dDurationMs', 0)) / 1000.0,
        ))
    return raw


def from_caption_events(events: Iterable[Dict], **kwargs) -> Transcript:
    """Transcript from a JSON3 caption payload's ``events`` list"""
    return build_transcript(caption_event_segments(events), **kwargs)


def from_proxy_segments(items: Iterable[Dict], **kwargs) -> Transcript:
    """Transcript from a transcript-proxy segment array (offsets in milliseconds)"""
    raw = [
        (item.get('text'), float(item.get('offset') or 0) / 1000.0, float(item.get('duration') or 0) / 1000.0)
        for item in items or []
    ]
    return build_transcript(raw, **kwargs)


def _segment_value(segment: Any, key: str, default: Any = None) -> Any:
    if isinstance(segment, dict):
        return segment.get(key, default)
    return getattr(segment, key, default)


def from_speech_segments(items: Iterable[Any], **kwargs) -> Transcript:
    """Transcript from Whisper ``verbose_json`` segments (start/end in seconds)"""
    raw = []
    for item in items or []:
        start = float(_segment_value(item, 'start', 0) or 0)
        end = float(_segment_value(item, 'end', start) or start)
        raw.append((_segment_value(item, 'text', ''), start, max(0.0, end - start)))
    return build_transcript(raw, **kwargs)


def from_snippets(snippets: Iterable[Any], **kwargs) -> Transcript:
    """Transcript from caption-client snippets exposing text/start/duration"""
    raw = [
        (_segment_value(item, 'text', ''), _segment_value(item, 'start', 0), _segment_value(item, 'duration', 0))
        for item in snippets or []
    ]
    return build_transcript(raw, **kwargs)
