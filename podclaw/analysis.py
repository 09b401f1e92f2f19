"""Build the input handed to the downstream episode-analysis call.

The analysis service accepts exactly one of two shapes:

    {"audioReference": "<url>"}
    {"transcriptText": "<timestamped text>", "contextHint": "<optional>"}

Resolved episodes go in by reference, YouTube transcripts go in as text with the
video URL as a hint about where the text came from.
"""

from dataclasses import dataclass
from typing import Optional

from .exceptions import InvalidInput
from .models import EpisodeDescriptor, Transcript


@dataclass(frozen=True)
class AnalysisRequest:
    """One valid analysis input; exactly one of ``audio_reference``/``transcript_text`` is set"""
    audio_reference: Optional[str] = None
    transcript_text: Optional[str] = None
    context_hint: Optional[str] = None

    def __post_init__(self):
        if bool(self.audio_reference) == bool(self.transcript_text):
            raise InvalidInput('Analysis needs either an audio reference or transcript text.')
        if self.context_hint and not self.transcript_text:
            raise InvalidInput('A context hint only applies to transcript text.')

    @classmethod
    def from_descriptor(cls, descriptor: EpisodeDescriptor) -> 'AnalysisRequest':
        if not descriptor.audio_url:
            raise InvalidInput('Episode has no audio to analyze.')
        return cls(audio_reference=descriptor.audio_url)

    @classmethod
    def from_transcript(cls, transcript: Transcript, context_hint: Optional[str] = None) -> 'AnalysisRequest':
        if not transcript.plain_text.strip():
            raise InvalidInput('Transcript is empty.')
        return cls(
            transcript_text=transcript.plain_text,
            context_hint=context_hint or transcript.canonical_url,
        )

    def to_payload(self) -> dict:
        if self.audio_reference:
            return {'audioReference': self.audio_reference}
        payload = {'transcriptText': self.transcript_text}
        if self.context_hint:
            payload['contextHint'] = self.context_hint
        return payload
