from __future__ import annotations

import asyncio
import enum
import logging

from typing import Callable, Optional, TypeVar

from .config import ServeConfig
from .element import Button, Text
from .errors import FatalError, RunLoopFailure
from .gui import GUI
from .interchange import Interaction
from .server import serve_async

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[[], None])

class RunState(enum.Enum):
    IDLE = 'idle'
    RUNNING = 'running'

class CounterUI(GUI):
    '''A numeric display and a button, served to a browser.

    The counter itself knows nothing about the button: whoever wants presses to
    do something registers a callback with :meth:`on_button_pressed`.

        >>> ui = CounterUI()
        >>> @ui.on_button_pressed
        ... def bump():
        ...   ui.set_counter(ui.get_counter() + 1)
        >>> ui.invoke_button_pressed()
        >>> ui.get_counter()
        1
    '''
    def __init__(self, config: Optional[ServeConfig] = None, button_text: str = '+1') -> None:
        self._counter = 0
        self._display = Text(str(self._counter))
        self._button = Button(button_text)
        super().__init__(self._display, self._button)
        self._button_pressed: Optional[Callable[[], None]] = None
        self._button.set_callback(self._dispatch_button_pressed)
        self._config = config if config is not None else ServeConfig()
        self._state = RunState.IDLE
        self._shutdown: Optional[asyncio.Event] = None

    def __repr__(self) -> str:
        return f'CounterUI(counter={self._counter!r}, state={self._state.value!r})'

    @property
    def display(self) -> Text:
        return self._display

    @property
    def button(self) -> Button:
        return self._button

    @property
    def state(self) -> RunState:
        return self._state

    def get_counter(self) -> int:
        return self._counter

    def set_counter(self, value: int) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(value)
        self._counter = value
        # re-rendering the display marks it dirty, which wakes any pollers
        self._display.text = str(value)

    def on_button_pressed(self, callback: F) -> F:
        '''Make ``callback`` the one thing a button press does. Returns it, for use as a decorator.'''
        self._button_pressed = callback
        return callback

    def invoke_button_pressed(self) -> None:
        '''Press the button from code, exactly as a browser click would.'''
        self._button.handle_interaction(Interaction(target=self._button.id, type='click'))

    def _dispatch_button_pressed(self) -> None:
        if self._button_pressed is not None:
            self._button_pressed()

    def run(self) -> None:
        '''Serve the UI and block until it is closed.

        Callers that already have a running event loop must ``await run_async()`` instead.
        '''
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RunLoopFailure('run() called from inside a running event loop; await run_async() instead')
        try:
            asyncio.run(self.run_async())
        except FatalError:
            raise
        except Exception as e:
            raise RunLoopFailure(f'run loop crashed: {e}') from e

    async def run_async(self) -> None:
        if self._state is RunState.RUNNING:
            raise RunLoopFailure('run loop is already running')
        self._state = RunState.RUNNING
        self._shutdown = asyncio.Event()
        logger.debug('entering run loop')
        try:
            await serve_async(self, config=self._config, shutdown=self._shutdown)
        except FatalError:
            raise
        except Exception as e:
            raise RunLoopFailure(f'run loop crashed: {e}') from e
        logger.debug('run loop closed')

    def close(self) -> None:
        '''Ask a running loop to stop. Does nothing if the loop isn't running.'''
        if self._shutdown is not None:
            self._shutdown.set()
