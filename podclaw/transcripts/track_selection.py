"""Caption track selection shared by the caption-client and player-endpoint strategies"""

from typing import List, Optional

from ..models import CaptionTrack


def _is_english(code: str) -> bool:
    return code.lower().split('-')[0] == 'en'


def select_track(tracks: List[CaptionTrack]) -> Optional[CaptionTrack]:
    """Pick the best caption track.

    Manual English first, then any track whose code starts with "en", then whatever
    comes first. English being unavailable is never a failure on its own.
    """
    if not tracks:
        return None

    for track in tracks:
        if not track.is_generated and _is_english(track.language_code):
            return track

    for track in tracks:
        if track.language_code.lower().startswith('en'):
            return track

    return tracks[0]
