#!/usr/bin/env python3
"""
Podclaw - podcast link resolution and transcript service
Main entry point
"""

import asyncio
import json
import sys
from pathlib import Path

# Ensure the package can be imported when run directly
sys.path.insert(0, str(Path(__file__).parent))

from podclaw.analysis import AnalysisRequest
from podclaw.config import SERVER_HOST, SERVER_PORT
from podclaw.exceptions import PodclawError
from podclaw.fetchers.link_router import LinkRouter
from podclaw.transcripts.fetcher import TranscriptFetcher
from podclaw.utils.http import create_session
from podclaw.utils.logging import setup_logging

# Set up logging first
logger = setup_logging()


def print_help():
    """Print help information"""
    print("Podclaw - podcast link resolution and transcript service\n")
    print("Usage:")
    print("  python main.py [serve]                            # Run the HTTP API (default)")
    print("  python main.py resolve <url> [--episode-index N]  # Resolve a podcast link to audio")
    print("  python main.py transcript <url-or-video-id>       # Fetch a YouTube transcript")
    print("  python main.py resolve|transcript <url> --analysis-input  # Print the analysis model input")
    print("  python main.py -h                                 # Show this help\n")
    print("Environment Variables:")
    print("  TRANSCRIPT_STRATEGIES=captions,proxy,innertube,speech_to_text  # Fallback order")
    print("  TRANSCRIPT_PROXY_API_KEY=...       # Enables the transcript proxy strategy")
    print("  GROQ_API_KEY=...                   # Enables speech-to-text")
    print("  SERVER_HOST / SERVER_PORT          # Bind address (default: 0.0.0.0:8080)")
    print("\nExamples:")
    print("  python main.py resolve https://podcasts.apple.com/us/podcast/x/id123?i=456")
    print("  python main.py resolve https://example.com/feed.xml --episode-index 2")
    print("  python main.py transcript https://youtu.be/dQw4w9WgXcQ")
    print("  python main.py transcript https://youtu.be/dQw4w9WgXcQ --analysis-input")


def parse_arguments():
    """Parse command line arguments into (mode, target, options)"""
    args = sys.argv[1:]
    if not args:
        return "serve", None, {}

    mode = args[0]
    if mode in ["-h", "--help"]:
        print_help()
        sys.exit(0)

    if mode == "serve":
        return mode, None, {}

    if mode in ["resolve", "transcript"]:
        if len(args) < 2:
            print(f"Missing URL for '{mode}'\n")
            print_help()
            sys.exit(2)

        options = {}
        rest = args[2:]
        while rest:
            if rest[0] == "--analysis-input":
                options['analysis_input'] = True
                rest = rest[1:]
            elif mode == "resolve" and rest[0] == "--episode-index" and len(rest) > 1 and rest[1].isdigit():
                options['episode_index'] = int(rest[1])
                rest = rest[2:]
            else:
                print(f"Unknown options: {' '.join(rest)}\n")
                print_help()
                sys.exit(2)
        return mode, args[1], options

    print(f"Unknown command: {mode}\n")
    print_help()
    sys.exit(2)


async def run_resolve(url: str, episode_index: int = 0, analysis_input: bool = False) -> dict:
    async with create_session() as session:
        descriptor = await LinkRouter(session, episode_index=episode_index).resolve(url)
    if analysis_input:
        return AnalysisRequest.from_descriptor(descriptor).to_payload()
    return descriptor.to_dict()


async def run_transcript(url: str, analysis_input: bool = False) -> dict:
    async with create_session() as session:
        transcript = await TranscriptFetcher(session).fetch(url)
    if analysis_input:
        return AnalysisRequest.from_transcript(transcript).to_payload()
    return transcript.to_dict()


def main():
    """Console entry point"""
    mode, target, options = parse_arguments()

    if mode == "serve":
        from podclaw.server import run_server
        run_server(SERVER_HOST, SERVER_PORT)
        return

    try:
        if mode == "resolve":
            result = asyncio.run(run_resolve(
                target, options.get('episode_index', 0), options.get('analysis_input', False)
            ))
        else:
            result = asyncio.run(run_transcript(target, options.get('analysis_input', False)))
    except PodclawError as e:
        logger.error(f"❌ {e.message}")
        print(json.dumps(e.to_dict(), indent=2))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\n⚠️  Interrupted by user")
        sys.exit(130)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
