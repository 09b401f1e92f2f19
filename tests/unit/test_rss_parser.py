"""Unit tests for feed parsing"""

import pytest

from conftest import make_feed, make_item
from podclaw.feeds.rss_parser import extract_audio_url, parse_feed

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Show</title>
  <logo>https://x.example/logo.png</logo>
  <entry>
    <title>Atom Episode</title>
    <id>urn:uuid:1</id>
    <updated>2024-01-01T00:00:00Z</updated>
    <link rel="alternate" href="https://x.example/episodes/1"/>
    <link rel="enclosure" type="audio/mpeg" length="1234" href="https://x.example/1.mp3"/>
  </entry>
  <entry>
    <title>Atom Post Without Audio</title>
    <id>urn:uuid:2</id>
    <updated>2024-01-02T00:00:00Z</updated>
    <link rel="alternate" href="https://x.example/posts/2"/>
  </entry>
</feed>"""


class TestExtractAudioUrl:
    """Test enclosure lookup across feed flavours"""

    @pytest.mark.unit
    def test_rss_enclosure(self):
        assert extract_audio_url({'enclosures': [{'href': 'https://a.example/x.mp3'}]}) == 'https://a.example/x.mp3'

    @pytest.mark.unit
    def test_enclosure_link(self):
        entry = {'links': [
            {'rel': 'alternate', 'href': 'https://a.example/page'},
            {'rel': 'enclosure', 'href': 'https://a.example/y.m4a'},
        ]}
        assert extract_audio_url(entry) == 'https://a.example/y.m4a'

    @pytest.mark.unit
    def test_media_content(self):
        entry = {'media_content': [
            {'type': 'image/jpeg', 'url': 'https://a.example/c.jpg'},
            {'type': 'audio/mpeg', 'url': 'https://a.example/z.mp3'},
        ]}
        assert extract_audio_url(entry) == 'https://a.example/z.mp3'

    @pytest.mark.unit
    def test_nothing_to_play(self):
        assert extract_audio_url({'links': [{'rel': 'alternate', 'href': 'https://a.example/page'}]}) is None


class TestParseFeed:
    """Test feed-level parsing rules"""

    @pytest.mark.unit
    def test_basic_feed(self, rss_feed):
        """Test a three-item feed parses in order with show metadata"""
        episodes = parse_feed(rss_feed)

        assert [e.title for e in episodes] == [
            "Episode 3: The Latest", "Episode 2: The Middle", "Episode 1: The Beginning"
        ]
        assert [e.duration_seconds for e in episodes] == [3723, 2700, 90]
        assert all(e.show_title == "Test Podcast" for e in episodes)
        assert all(e.artwork == "https://cdn.example.com/show.jpg" for e in episodes)

    @pytest.mark.unit
    def test_item_artwork_overrides_show(self):
        feed = make_feed([make_item("A", "https://x.example/a.mp3", image="https://x.example/a.jpg")])
        assert parse_feed(feed)[0].artwork == "https://x.example/a.jpg"

    @pytest.mark.unit
    def test_channel_image_fallback(self):
        feed = make_feed([make_item("A", "https://x.example/a.mp3")], artwork=None).replace(
            "<channel>", "<channel><image><url>https://x.example/channel.png</url></image>"
        )
        assert parse_feed(feed)[0].artwork == "https://x.example/channel.png"

    @pytest.mark.unit
    def test_items_without_enclosure_dropped(self):
        """Test items with nothing to play are skipped"""
        feed = make_feed([
            make_item("Trailer", mp3_url=""),
            make_item("Real Episode", "https://x.example/real.mp3"),
        ])
        episodes = parse_feed(feed)
        assert len(episodes) == 1
        assert episodes[0].title == "Real Episode"

    @pytest.mark.unit
    def test_cap_applies_before_filtering(self):
        """Test only the first 50 item blocks are looked at, playable or not"""
        items = [make_item(f"No audio {i}", mp3_url="") for i in range(10)]
        items += [make_item(f"Episode {i}", f"https://x.example/{i}.mp3") for i in range(60)]
        episodes = parse_feed(make_feed(items))

        assert len(episodes) == 40
        assert episodes[-1].title == "Episode 39"

    @pytest.mark.unit
    def test_cdata_title_and_defaults(self):
        feed = make_feed([
            make_item("Fish & Chips", "https://x.example/a.mp3", cdata=True),
            "<item><enclosure url=\"https://x.example/b.mp3\"/></item>",
        ], show_title="")
        episodes = parse_feed(feed)

        assert episodes[0].title == "Fish & Chips"
        assert episodes[1].title == "Untitled"
        assert episodes[1].duration_seconds == 0
        assert episodes[0].show_title == "Unknown Podcast"

    @pytest.mark.unit
    def test_empty_and_garbage(self):
        assert parse_feed("") == []
        assert parse_feed("<html><body>Not a feed</body></html>") == []

    @pytest.mark.unit
    def test_entity_title(self):
        feed = make_feed([make_item("Q&amp;A &#8211; Part 1", "https://x.example/a.mp3")])
        assert parse_feed(feed)[0].title == "Q&A – Part 1"

    @pytest.mark.unit
    def test_bad_duration_does_not_break_feed(self):
        """Test an unparseable duration only zeroes that episode"""
        feed = make_feed([
            make_item("Broken", "https://x.example/a.mp3", duration="NaN:00"),
            make_item("Fine", "https://x.example/b.mp3", duration="2:00"),
        ])
        episodes = parse_feed(feed)

        assert [e.duration_seconds for e in episodes] == [0, 120]

    @pytest.mark.unit
    def test_bytes_input(self, rss_feed):
        assert len(parse_feed(rss_feed.encode('utf-8'))) == 3


class TestAtomFeed:
    """Test Atom feeds with enclosure links"""

    @pytest.mark.unit
    def test_atom_entries(self):
        episodes = parse_feed(ATOM_FEED)

        assert len(episodes) == 1
        assert episodes[0].title == "Atom Episode"
        assert episodes[0].mp3_url == "https://x.example/1.mp3"
        assert episodes[0].show_title == "Atom Show"
        assert episodes[0].artwork == "https://x.example/logo.png"
        assert episodes[0].duration_seconds == 0
