"""RSS resolver - picks an item straight out of a podcast feed"""

from . import SourceResolver
from ..feeds.rss_parser import fetch_feed_episodes
from ..models import EpisodeDescriptor, LinkReference, SourceKind


class RSSResolver(SourceResolver):
    """Resolve a feed URL to one of its episodes (the most recent by default)"""

    def __init__(self, session, episode_index: int = 0):
        super().__init__(session)
        self.episode_index = episode_index

    @property
    def name(self) -> str:
        return "rss"

    def can_handle(self, reference: LinkReference) -> bool:
        return reference.kind in (SourceKind.RSS, SourceKind.UNKNOWN)

    async def resolve(self, reference: LinkReference) -> EpisodeDescriptor:
        feed_url = reference.canonical_id or reference.raw_input
        episodes = await fetch_feed_episodes(self.session, feed_url)

        # An index past the end falls back to the latest episode
        index = self.episode_index if 0 <= self.episode_index < len(episodes) else 0
        episode = episodes[index]

        return EpisodeDescriptor(
            audio_url=episode.mp3_url,
            title=episode.title,
            show=episode.show_title or 'Unknown Podcast',
            artwork=episode.artwork,
            duration_seconds=episode.duration_seconds,
            source_kind=SourceKind.RSS,
        )
