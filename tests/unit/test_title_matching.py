"""Unit tests for fuzzy episode title matching"""

import pytest

from podclaw.fetchers.title_matching import match_catalog_title, match_title_prefix
from podclaw.models import FeedEpisodeEntry


def entries(*titles):
    return [FeedEpisodeEntry(title=title, mp3_url=f"https://x.example/{i}.mp3") for i, title in enumerate(titles)]


class TestCatalogMatching:
    """Test the two-way Apple catalog match"""

    @pytest.mark.unit
    def test_feed_title_contains_catalog_title(self):
        feed = entries("#500 - Other Guest", "#501 - Episode 42: Guest Name (Full Interview)")
        match = match_catalog_title(feed, "Episode 42: Guest Name")
        assert match is feed[1]

    @pytest.mark.unit
    def test_catalog_title_contains_feed_prefix(self):
        """Test the reverse direction uses the first 30 characters of the feed title"""
        feed = entries("Unrelated", "The Future of Energy Storage and Grid Reliability | Ep. 12")
        match = match_catalog_title(feed, "Ep. 12: The Future of Energy Storage and Grid Reliability")
        assert match is feed[1]

    @pytest.mark.unit
    def test_case_insensitive(self):
        feed = entries("EPISODE 42: GUEST NAME")
        assert match_catalog_title(feed, "episode 42: guest name") is feed[0]

    @pytest.mark.unit
    def test_no_match(self):
        assert match_catalog_title(entries("Alpha", "Beta"), "Gamma Delta Epsilon") is None
        assert match_catalog_title(entries("Alpha"), "") is None


class TestPrefixMatching:
    """Test the Spotify-side prefix match"""

    @pytest.mark.unit
    def test_prefix_of_long_title(self):
        feed = entries("Intro", "How We Built The Thing That Nobody Expected (Part 2) [Rebroadcast]")
        match = match_title_prefix(feed, "How We Built The Thing That Nobody Expected (Part 2)")
        assert match is feed[1]

    @pytest.mark.unit
    def test_prefix_no_match(self):
        assert match_title_prefix(entries("Alpha"), "Beta") is None
