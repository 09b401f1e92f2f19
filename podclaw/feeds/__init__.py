"""RSS/Atom feed handling"""

from .rss_parser import fetch_feed_episodes, parse_duration, parse_feed

__all__ = ["fetch_feed_episodes", "parse_duration", "parse_feed"]
