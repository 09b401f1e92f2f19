"""Unit tests for the transcript proxy and player-endpoint strategies"""

import re

import pytest

from podclaw.exceptions import AuthError, NotFound, RateLimited, UpstreamUnavailable
from podclaw.transcripts.innertube import InnertubeStrategy
from podclaw.transcripts.transcript_apis import ProxyTranscriptStrategy

VIDEO_ID = "dQw4w9WgXcQ"
PROXY_URL = re.compile(r'^https://proxy\.example\.com/v1/youtube/transcript.*$')
PLAYER_URL = "https://www.youtube.com/youtubei/v1/player"
TIMEDTEXT_URL = re.compile(r'^https://www\.youtube\.com/api/timedtext.*$')


class TestProxyTranscriptStrategy:
    """Test the metered transcript proxy"""

    @pytest.fixture
    def strategy(self, session):
        return ProxyTranscriptStrategy(session, api_key="test-key", base_url="https://proxy.example.com/v1/")

    @pytest.mark.unit
    def test_availability(self):
        assert not ProxyTranscriptStrategy(None, api_key=None).is_available()
        assert ProxyTranscriptStrategy(None, api_key="k").is_available()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_segments(self, strategy, mock_http):
        mock_http.get(PROXY_URL, payload={
            'lang': 'en',
            'content': [
                {'text': 'First line', 'offset': 0, 'duration': 2000},
                {'text': 'Second line', 'offset': 61000, 'duration': 1500},
            ],
        })

        transcript = await strategy.fetch(VIDEO_ID)

        assert transcript.source == "proxy"
        assert transcript.plain_text == "[0:00] First line\n[1:01] Second line"
        assert transcript.total_duration_label == "1:03"

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,error", [
        (401, AuthError),
        (403, AuthError),
        (429, RateLimited),
        (404, NotFound),
        (502, UpstreamUnavailable),
    ])
    async def test_status_mapping(self, strategy, mock_http, status, error):
        mock_http.get(PROXY_URL, status=status, body="nope")
        with pytest.raises(error):
            await strategy.fetch(VIDEO_ID)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_malformed_payload(self, strategy, mock_http):
        mock_http.get(PROXY_URL, payload={'content': 42})
        with pytest.raises(UpstreamUnavailable):
            await strategy.fetch(VIDEO_ID)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_content(self, strategy, mock_http):
        mock_http.get(PROXY_URL, payload={'content': []})
        with pytest.raises(NotFound):
            await strategy.fetch(VIDEO_ID)


def player_response(status='OK', reason=None, tracks=None):
    data = {
        'playabilityStatus': {'status': status},
        'videoDetails': {'videoId': VIDEO_ID, 'title': 'A Great Talk'},
    }
    if reason:
        data['playabilityStatus']['reason'] = reason
    if tracks is not None:
        data['captions'] = {'playerCaptionsTracklistRenderer': {'captionTracks': tracks}}
    return data


class TestInnertubeStrategy:
    """Test the internal player endpoint strategy"""

    @pytest.fixture
    def strategy(self, session):
        return InnertubeStrategy(session, player_url=PLAYER_URL)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fetches_json3_for_selected_track(self, strategy, mock_http):
        tracks = [
            {'baseUrl': 'https://www.youtube.com/api/timedtext?v=x&lang=de', 'languageCode': 'de',
             'name': {'simpleText': 'German'}},
            {'baseUrl': 'https://www.youtube.com/api/timedtext?v=x&lang=en&kind=asr&fmt=srv3', 'languageCode': 'en',
             'kind': 'asr', 'name': {'runs': [{'text': 'English (auto-generated)'}]}},
        ]
        mock_http.post(PLAYER_URL, payload=player_response(tracks=tracks))
        mock_http.get(TIMEDTEXT_URL, payload={'events': [
            {'tStartMs': 0, 'dDurationMs': 1000, 'segs': [{'utf8': 'Welcome'}]},
        ]})

        transcript = await strategy.fetch(VIDEO_ID)

        assert transcript.title == 'A Great Talk'
        assert transcript.source == 'innertube'
        assert transcript.plain_text == "[0:00] Welcome"
        requested = [str(url) for method, url in mock_http.requests.keys() if method == 'GET']
        assert any('lang=en' in url and 'fmt=json3' in url and 'srv3' not in url for url in requested)

    @pytest.mark.unit
    def test_json3_url(self):
        url = InnertubeStrategy._json3_url('https://www.youtube.com/api/timedtext?v=x&fmt=srv3&lang=en')
        assert url == 'https://www.youtube.com/api/timedtext?v=x&lang=en&fmt=json3'

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,reason,error", [
        ('LOGIN_REQUIRED', 'Sign in to confirm you’re not a bot', RateLimited),
        ('LOGIN_REQUIRED', 'Sign in to confirm your age', NotFound),
        ('LOGIN_REQUIRED', 'This video is private', NotFound),
        ('ERROR', 'Video unavailable', NotFound),
        ('UNPLAYABLE', 'Not available in your country', NotFound),
        ('LIVE_STREAM_OFFLINE', None, UpstreamUnavailable),
    ])
    async def test_playability(self, strategy, mock_http, status, reason, error):
        mock_http.post(PLAYER_URL, payload=player_response(status=status, reason=reason))
        with pytest.raises(error):
            await strategy.fetch(VIDEO_ID)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_caption_tracks(self, strategy, mock_http):
        mock_http.post(PLAYER_URL, payload=player_response())
        with pytest.raises(NotFound):
            await strategy.fetch(VIDEO_ID)
