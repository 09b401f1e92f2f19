"""Configuration and constants for Podclaw"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Outbound HTTP
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))
USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36",
)
FEED_USER_AGENT = os.getenv("FEED_USER_AGENT", "Podclaw/1.0")

# Feed parsing
MAX_FEED_EPISODES = int(os.getenv("MAX_FEED_EPISODES", "50"))

# Public catalog (iTunes) and Spotify oEmbed
ITUNES_BASE_URL = os.getenv("ITUNES_BASE_URL", "https://itunes.apple.com")
SPOTIFY_OEMBED_URL = os.getenv("SPOTIFY_OEMBED_URL", "https://open.spotify.com/oembed")
CATALOG_SEARCH_LIMIT = int(os.getenv("CATALOG_SEARCH_LIMIT", "10"))

# Transcript strategies, tried in this order
TRANSCRIPT_STRATEGIES = [
    name.strip()
    for name in os.getenv("TRANSCRIPT_STRATEGIES", "captions,proxy,innertube,speech_to_text").split(",")
    if name.strip()
]

# Third-party transcript proxy
TRANSCRIPT_PROXY_API_KEY = os.getenv("TRANSCRIPT_PROXY_API_KEY")
TRANSCRIPT_PROXY_BASE_URL = os.getenv("TRANSCRIPT_PROXY_BASE_URL", "https://api.supadata.ai/v1")

# Internal player endpoint
INNERTUBE_URL = os.getenv("INNERTUBE_URL", "https://www.youtube.com/youtubei/v1/player")
INNERTUBE_CLIENT_VERSION = os.getenv("INNERTUBE_CLIENT_VERSION", "2.20240726.00.00")

# Speech-to-text (OpenAI-compatible Whisper endpoint, Groq by default)
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
STT_BASE_URL = os.getenv("STT_BASE_URL", "https://api.groq.com/openai/v1")
STT_MODEL = os.getenv("STT_MODEL", "whisper-large-v3-turbo")
STT_LANGUAGE = os.getenv("STT_LANGUAGE", "en")
# Whisper rejects uploads above 25 MB
MAX_AUDIO_BYTES = int(os.getenv("MAX_AUDIO_BYTES", str(25 * 1024 * 1024)))
AUDIO_DOWNLOAD_TIMEOUT_SECONDS = float(os.getenv("AUDIO_DOWNLOAD_TIMEOUT_SECONDS", "300"))
STT_TIMEOUT_SECONDS = float(os.getenv("STT_TIMEOUT_SECONDS", "300"))

# HTTP server
SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("SERVER_PORT", "8080"))

# Logging
LOG_FILE = os.getenv("LOG_FILE", "podclaw.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
