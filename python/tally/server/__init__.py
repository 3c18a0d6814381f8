import asyncio
import logging
import webbrowser

from pathlib import Path
from typing import Optional, Sequence, cast

from aiohttp import web

from ..config import ServeConfig
from ..element import Element
from ..errors import FatalError
from ..gui import AbstractGUI
from ..interchange import Interaction
from ..types import ElementId
from . import _auth

logger = logging.getLogger(__name__)

CLIENT_HTML = (Path(__file__).parent / 'static' / 'index.html').resolve()
assert CLIENT_HTML.is_file()

class Server:
    def __init__(self, gui: AbstractGUI, condition: asyncio.Condition, shutdown: asyncio.Event) -> None:
        self.gui = gui
        self.condition = condition
        self.shutdown = shutdown
        self.failure: Optional[FatalError] = None

    def build_routes(self) -> Sequence[web.RouteDef]:
        return [
            web.get('/', self.index),
            web.post('/poll', self.poll),
            web.post('/interaction', self.interaction),
        ]

    async def index(self, request: web.Request) -> web.StreamResponse:
        return web.FileResponse(CLIENT_HTML)

    async def poll(self, request: web.Request) -> web.StreamResponse:
        since = await _read_json(request)
        if not isinstance(since, int) or isinstance(since, bool):
            raise web.HTTPBadRequest(reason='poll body must be an integer time step')
        async with self.condition:
            await self.condition.wait_for(lambda: self.gui.time_step > since or self.shutdown.is_set())
            if self.gui.time_step <= since:
                raise web.HTTPServiceUnavailable(reason='shutting down')
            return web.json_response(self.gui.render_poll_response(since=since))

    async def wake_pollers(self) -> None:
        async with self.condition:
            self.condition.notify_all()

    async def interaction(self, request: web.Request) -> web.StreamResponse:
        try:
            interaction = Interaction.from_json(await _read_json(request))
        except ValueError as e:
            raise web.HTTPBadRequest(reason=str(e.args[0]))
        async with self.condition:
            element = _find_element_or_404(self.gui.root, interaction.target)
            try:
                element.handle_interaction(interaction)
            except FatalError as e:
                logger.error('fatal error while handling %r; shutting down', interaction, exc_info=True)
                self.failure = e
                self.shutdown.set()
                raise web.HTTPInternalServerError(reason='fatal error; shutting down')
        return web.Response(text='ok')

async def _read_json(request: web.Request):
    try:
        return await request.json()
    except ValueError:
        raise web.HTTPBadRequest(reason='body is not valid JSON')

def _find_element_or_404(root: Element, id: ElementId) -> Element:
    result = next((e for e in root.walk() if e.id == id), None)
    if result is None:
        raise web.HTTPNotFound(reason=f'no element with id {id!r}')
    return result

SERVER_KEY = web.AppKey('server', Server)

def build_server_app(
    gui: AbstractGUI,
    *,
    token: str,
    shutdown: Optional[asyncio.Event] = None,
) -> web.Application:
    '''Must be called with a running event loop; pollers are woken on that loop.'''
    loop = asyncio.get_running_loop()
    condition = asyncio.Condition()
    if shutdown is None:
        shutdown = asyncio.Event()

    server = Server(gui, condition, shutdown)
    def wake_pollers_on_change() -> None:
        asyncio.run_coroutine_threadsafe(server.wake_pollers(), loop)
    gui.add_listener(wake_pollers_on_change)

    async def _stop_listening(_: web.Application) -> None:
        gui.remove_listener(wake_pollers_on_change)

    app = web.Application(middlewares=[_auth.build_middleware(token=token)])
    app.on_cleanup.append(_stop_listening)
    app[SERVER_KEY] = server
    app.add_routes(_auth.build_routes(token=token))
    app.add_routes(server.build_routes())
    return app

async def serve_async(
    gui: AbstractGUI,
    *,
    config: Optional[ServeConfig] = None,
    shutdown: Optional[asyncio.Event] = None,
) -> None:
    '''Serve ``gui`` until ``shutdown`` is set.

    Re-raises any :class:`FatalError` that escaped an interaction handler.
    '''
    config = (config if config is not None else ServeConfig()).resolved()
    url = config.auth_url
    if shutdown is None:
        shutdown = asyncio.Event()

    app = build_server_app(gui, token=cast(str, config.token), shutdown=shutdown)

    logger.info('serving on: %s', url)
    if config.open_browser:
        async def _open_browser(_: web.Application) -> None:
            webbrowser.open(url)
        app.on_startup.append(_open_browser)

    server = app[SERVER_KEY]
    runner = web.AppRunner(app)
    await runner.setup()
    try:
        site = web.TCPSite(runner, config.host, config.port)
        await site.start()
        await shutdown.wait()
    finally:
        shutdown.set()
        await server.wake_pollers()
        await runner.cleanup()

    failure = server.failure
    if failure is not None:
        raise failure

def serve(
    gui: AbstractGUI,
    *,
    config: Optional[ServeConfig] = None,
) -> None:
    asyncio.run(serve_async(gui, config=config))
