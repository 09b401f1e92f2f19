"""Podclaw - resolve podcast and video links into audio or timestamped transcripts"""

__version__ = "1.0.0"
