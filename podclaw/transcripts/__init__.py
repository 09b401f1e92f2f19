"""Transcript strategies for YouTube videos"""

from abc import ABC, abstractmethod

from ..models import Transcript


class TranscriptStrategy(ABC):
    """Base class for transcript acquisition strategies"""

    @abstractmethod
    async def fetch(self, video_id: str) -> Transcript:
        """
        Fetch a transcript for a video.
        Raises a PodclawError subclass on failure.
        """
        pass

    def is_available(self) -> bool:
        """Whether the strategy is configured (credentials present, etc.)"""
        return True

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name for logging"""
        pass
