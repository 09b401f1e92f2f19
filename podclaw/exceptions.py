"""Error taxonomy shared by resolvers, transcript strategies and the HTTP layer"""

from typing import Optional

MAX_DETAILS_LENGTH = 200


class PodclawError(Exception):
    """Base class for errors that are reported to the caller.

    ``status`` is the HTTP-style status class of the error. ``details`` is an optional
    short diagnostic preview; it is truncated so raw upstream payloads never leak in full.
    """

    status = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = preview(details) if details else None

    def to_dict(self) -> dict:
        body = {'error': self.message}
        if self.details:
            body['details'] = self.details
        return body


class InvalidInput(PodclawError):
    """Unparseable or unsupported link"""
    status = 400


class NotFound(PodclawError):
    """No audio, no captions or no feed episodes"""
    status = 404


class UpstreamUnavailable(PodclawError):
    """Non-success response, malformed payload or size-limit violation from a third party"""
    status = 500


class AudioTooLarge(UpstreamUnavailable):
    """Audio exceeds what the transcription service accepts"""


class AuthError(PodclawError):
    """Missing or invalid upstream credential"""
    status = 401


class RateLimited(PodclawError):
    """Upstream throttling or bot detection"""
    status = 429


def preview(text: Optional[str], limit: int = MAX_DETAILS_LENGTH) -> str:
    """Collapse whitespace and cap a diagnostic string"""
    if not text:
        return ''
    text = ' '.join(str(text).split())
    if len(text) <= limit:
        return text
    return text[:limit - 3] + '...'