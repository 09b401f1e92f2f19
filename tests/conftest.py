"""Shared test configuration and fixtures for Podclaw tests"""

import sys
from pathlib import Path
from typing import List, Optional

import pytest
import pytest_asyncio
from aioresponses import aioresponses
from faker import Faker

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from podclaw.models import Transcript
from podclaw.transcripts.normalizer import build_transcript
from podclaw.utils.http import create_session

# Initialize faker for test data generation
fake = Faker()


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without network access")
    config.addinivalue_line("markers", "integration: tests that exercise several components with mocked HTTP")


# ===== RSS Factories =====

def make_item(title: Optional[str] = None, mp3_url: Optional[str] = None, duration: str = "1:30",
              image: Optional[str] = None, cdata: bool = False) -> str:
    """Build one <item> block; pass ``mp3_url=''`` for an item without an enclosure"""
    title = title if title is not None else fake.catch_phrase()
    title_xml = f"<![CDATA[{title}]]>" if cdata else title
    if mp3_url is None:
        mp3_url = f"https://cdn.example.com/{fake.uuid4()}.mp3"
    enclosure = f'<enclosure url="{mp3_url}" type="audio/mpeg" length="1234"/>' if mp3_url else ''
    image_xml = f'<itunes:image href="{image}"/>' if image else ''
    return (
        "<item>"
        f"<title>{title_xml}</title>"
        f"{enclosure}"
        f"{image_xml}"
        f"<itunes:duration>{duration}</itunes:duration>"
        "</item>"
    )


def make_feed(items: List[str], show_title: str = "Test Podcast",
              artwork: Optional[str] = "https://cdn.example.com/show.jpg") -> str:
    """Wrap item blocks in a podcast RSS document"""
    artwork_xml = f'<itunes:image href="{artwork}"/>' if artwork else ''
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">'
        "<channel>"
        f"<title>{show_title}</title>"
        f"{artwork_xml}"
        f"{''.join(items)}"
        "</channel></rss>"
    )


def make_transcript(lines=None, video_id: str = "dQw4w9WgXcQ", source: str = "captions") -> Transcript:
    """Transcript from (text, start, duration) tuples"""
    lines = lines or [("Hello and welcome", 0.0, 2.5), ("to the show", 2.5, 3.0)]
    return build_transcript(lines, video_id=video_id, source=source)


# ===== Fixtures =====

@pytest.fixture
def rss_feed():
    """Feed with three playable episodes"""
    return make_feed([
        make_item("Episode 3: The Latest", "https://cdn.example.com/ep3.mp3", "1:02:03"),
        make_item("Episode 2: The Middle", "https://cdn.example.com/ep2.mp3", "45:00"),
        make_item("Episode 1: The Beginning", "https://cdn.example.com/ep1.mp3", "90"),
    ])


@pytest.fixture
def sample_transcript():
    return make_transcript()


@pytest.fixture
def mock_http():
    """Intercept all outbound aiohttp requests"""
    with aioresponses() as m:
        yield m


@pytest_asyncio.fixture
async def session():
    """Request-scoped aiohttp session, closed after the test"""
    async with create_session() as client_session:
        yield client_session
