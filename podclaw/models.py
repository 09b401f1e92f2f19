"""Data models for Podclaw"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class SourceKind(Enum):
    """Kind of link a user pasted"""
    APPLE = "apple"
    SPOTIFY = "spotify"
    RSS = "rss"
    DIRECT_AUDIO = "direct_audio"
    YOUTUBE = "youtube"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class LinkReference:
    """Structured reference produced by the link classifier"""
    kind: SourceKind
    raw_input: str
    canonical_id: Optional[str] = None
    episode_id: Optional[str] = None


@dataclass
class FeedEpisodeEntry:
    """One playable item parsed out of an RSS feed"""
    title: str
    mp3_url: str
    artwork: str = ""
    duration_seconds: int = 0
    show_title: str = ""


@dataclass
class EpisodeDescriptor:
    """Resolved episode: a playable audio URL plus display metadata"""
    audio_url: Optional[str]
    title: str
    show: str
    artwork: str
    duration_seconds: int
    source_kind: SourceKind
    spotify_url: Optional[str] = None

    def __post_init__(self):
        """Durations are never negative"""
        self.duration_seconds = max(0, int(self.duration_seconds or 0))

    def to_dict(self) -> dict:
        """Convert to the resolve response shape"""
        data = {
            'mp3Url': self.audio_url,
            'title': self.title,
            'show': self.show,
            'artwork': self.artwork,
            'durationSeconds': self.duration_seconds,
            'sourceKind': self.source_kind.value,
        }
        if self.spotify_url:
            data['spotifyUrl'] = self.spotify_url
        return data


@dataclass
class TranscriptSegment:
    """A single timestamped line of a transcript"""
    text: str
    start_seconds: float
    duration_seconds: float
    timestamp_label: str

    def to_dict(self) -> dict:
        return {
            'text': self.text,
            'start': self.start_seconds,
            'duration': self.duration_seconds,
            'timestamp': self.timestamp_label,
        }


@dataclass
class Transcript:
    """Normalized transcript; ``plain_text`` is derived from ``segments``"""
    segments: List[TranscriptSegment]
    plain_text: str
    total_duration_label: str
    video_id: Optional[str] = None
    title: Optional[str] = None
    source: Optional[str] = None

    @property
    def canonical_url(self) -> Optional[str]:
        if not self.video_id:
            return None
        return f"https://www.youtube.com/watch?v={self.video_id}"

    def to_dict(self) -> dict:
        """Convert to the transcript response shape"""
        data = {
            'videoId': self.video_id,
            'canonicalUrl': self.canonical_url,
            'source': self.source,
            'totalDurationLabel': self.total_duration_label,
            'segmentCount': len(self.segments),
            'characterCount': len(self.plain_text),
            'plainText': self.plain_text,
            'segments': [segment.to_dict() for segment in self.segments],
        }
        if self.title:
            data['title'] = self.title
        return data


@dataclass
class CaptionTrack:
    """Strategy-neutral view of an available caption track"""
    language_code: str
    is_generated: bool = False
    name: str = ""
    handle: Any = field(default=None, repr=False, compare=False)
