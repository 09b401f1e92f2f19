"""HTTP surface: /api/resolve and /api/transcript with permissive CORS"""

from typing import Optional

from aiohttp import web

from .exceptions import InvalidInput, PodclawError
from .fetchers.link_router import LinkRouter
from .transcripts.fetcher import TranscriptFetcher
from .transcripts.youtube_transcript import CaptionClientSession
from .utils.http import create_session
from .utils.logging import get_logger

logger = get_logger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, POST, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type',
}

CAPTION_SESSION_KEY = 'caption_session'


def error_response(status: int, body: dict) -> web.Response:
    return web.json_response(body, status=status)


@web.middleware
async def cors_middleware(request: web.Request, handler):
    if request.method == 'OPTIONS':
        response = web.Response(status=200)
    else:
        response = await handler(request)
    response.headers.update(CORS_HEADERS)
    return response


@web.middleware
async def error_middleware(request: web.Request, handler):
    try:
        return await handler(request)
    except PodclawError as e:
        logger.warning(f"❌ {request.method} {request.path} -> {e.status}: {e.message}")
        return error_response(e.status, e.to_dict())
    except web.HTTPMethodNotAllowed:
        return error_response(405, {'error': 'Method not allowed. Use GET or POST.'})
    except web.HTTPException as e:
        return error_response(e.status, {'error': e.reason})
    except Exception:
        logger.exception(f"Unexpected error handling {request.method} {request.path}")
        return error_response(500, {'error': 'Internal server error.'})


async def _json_body(request: web.Request) -> dict:
    if not request.can_read_body:
        return {}
    try:
        body = await request.json()
    except ValueError:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise InvalidInput('Request body must be valid JSON.')
    if not isinstance(body, dict):
        raise InvalidInput('Request body must be a JSON object.')
    return body


def _episode_index(value) -> int:
    if value is None:
        return 0
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        raise InvalidInput('"episodeIndex" must be an integer.')


async def resolve_handler(request: web.Request) -> web.Response:
    body = await _json_body(request)
    url = body.get('url')
    if not isinstance(url, str) or not url.strip():
        raise InvalidInput('Missing "url" in request body.')

    async with create_session() as session:
        router = LinkRouter(session, episode_index=_episode_index(body.get('episodeIndex')))
        descriptor = await router.resolve(url)
    return web.json_response(descriptor.to_dict())


async def transcript_handler(request: web.Request) -> web.Response:
    target: Optional[str]
    if request.method == 'POST':
        target = (await _json_body(request)).get('url')
    else:
        target = request.query.get('url') or request.query.get('v')

    if not isinstance(target, str) or not target.strip():
        raise InvalidInput('Missing ?url= parameter.')

    async with create_session() as session:
        fetcher = TranscriptFetcher(session, caption_session=request.app[CAPTION_SESSION_KEY])
        transcript = await fetcher.fetch(target)
    return web.json_response(transcript.to_dict())


def create_app(caption_session: Optional[CaptionClientSession] = None) -> web.Application:
    """Build the application; the caption client session is the only state shared across requests"""
    app = web.Application(middlewares=[cors_middleware, error_middleware])
    app[CAPTION_SESSION_KEY] = caption_session or CaptionClientSession()

    app.router.add_route('POST', '/api/resolve', resolve_handler)
    app.router.add_route('OPTIONS', '/api/resolve', resolve_handler)
    app.router.add_route('GET', '/api/transcript', transcript_handler)
    app.router.add_route('POST', '/api/transcript', transcript_handler)
    app.router.add_route('OPTIONS', '/api/transcript', transcript_handler)
    return app


def run_server(host: str, port: int):
    logger.info(f"🚀 Podclaw listening on http://{host}:{port}")
    web.run_app(create_app(), host=host, port=port, print=None)
