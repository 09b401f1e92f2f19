"""Utility helper functions"""

import math
import re
from typing import Optional, Union
from urllib.parse import unquote, urlparse

Number = Union[int, float]

CLOCK_PART = re.compile(r'\d+(?:\.\d+)?')


def format_timestamp(seconds: Number) -> str:
    """Format seconds as M:SS under one hour, H:MM:SS otherwise.

    Fractional seconds are floored; negative input is treated as zero.
    """
    total = max(0, int(math.floor(seconds or 0)))
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_duration(duration_str: Optional[str]) -> int:
    """Parse an itunes:duration value into whole seconds.

    Accepts plain seconds, MM:SS and HH:MM:SS. Anything else yields 0.
    """
    if duration_str is None:
        return 0
    value = str(duration_str).strip()
    if not value:
        return 0

    # Colon presence decides between clock format and plain seconds
    if ':' in value:
        raw_parts = [part.strip() for part in value.split(':')]
        # float() would also accept nan/inf, so only plain decimals get through
        if not all(CLOCK_PART.fullmatch(part) for part in raw_parts if part):
            return 0
        parts = [float(part) if part else 0.0 for part in raw_parts]
        if len(parts) == 3:
            total = parts[0] * 3600 + parts[1] * 60 + parts[2]
        elif len(parts) == 2:
            total = parts[0] * 60 + parts[1]
        else:
            return 0
        if not math.isfinite(total):
            return 0
        return max(0, int(total))

    match = re.match(r'\d+', value)
    return int(match.group(0)) if match else 0


def ceil_seconds(value: Number) -> int:
    """Round a duration up to the next whole second"""
    return max(0, int(math.ceil(value or 0)))


def filename_title(url: str, default: str = "Episode") -> str:
    """Derive a display title from the last path segment of an audio URL"""
    path = urlparse(url).path if '://' in url else url.split('?')[0]
    filename = unquote(path.rstrip('/').split('/')[-1]) if path else ''
    if not filename:
        return default

    title = re.sub(r'\.(mp3|m4a|ogg|wav|aac)$', '', filename, flags=re.IGNORECASE)
    title = re.sub(r'[-_]', ' ', title).strip()
    return title or default
