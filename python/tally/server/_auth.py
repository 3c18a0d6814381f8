import logging
import secrets

from typing import Awaitable, Callable, Sequence

from aiohttp import web

logger = logging.getLogger(__name__)

TOKEN_COOKIE = 'tally_token'

def build_middleware(
    token: str,
):
    @web.middleware
    async def middleware(
        request: web.Request,
        handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
    ) -> web.StreamResponse:
        if request.path == f'/auth/{token}':
            return await handler(request)
        if not secrets.compare_digest(request.cookies.get(TOKEN_COOKIE, ''), token):
            logger.warning('rejecting %s %s: bad/no auth token', request.method, request.path)
            raise web.HTTPForbidden(reason='bad/no auth token')
        return await handler(request)
    return middleware

def build_routes(
    token: str,
) -> Sequence[web.RouteDef]:
    async def set_cookie_and_redirect(request: web.Request) -> web.Response:
        result = web.Response(status=302, headers={'Location': '/'})
        result.set_cookie(TOKEN_COOKIE, token, httponly=True, samesite='Strict')
        return result
    return [
        web.get(f'/auth/{token}', set_cookie_and_redirect),
    ]
