"""Source resolvers that turn a classified link into a playable episode"""

from abc import ABC, abstractmethod

import aiohttp

from ..models import EpisodeDescriptor, LinkReference


class SourceResolver(ABC):
    """Base class for per-platform resolvers"""

    def __init__(self, session: aiohttp.ClientSession):
        self.session = session

    @abstractmethod
    async def resolve(self, reference: LinkReference) -> EpisodeDescriptor:
        """
        Resolve a reference to an episode.
        Raises a PodclawError subclass when no audio can be found.
        """
        pass

    @abstractmethod
    def can_handle(self, reference: LinkReference) -> bool:
        """Check if this resolver can handle the given reference"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Resolver name for logging"""
        pass
