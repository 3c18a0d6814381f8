'''Wire the counter UI's button to its counter and run it.'''
from __future__ import annotations

import logging
import weakref

from typing import Callable, Optional

from .config import ServeConfig
from .counter import CounterUI
from .errors import FatalError, InitializationFailure, StaleHandleError

logger = logging.getLogger(__name__)

def bind_increment(handle: weakref.ReferenceType[CounterUI]) -> Callable[[], None]:
    '''Build a button callback that adds one to the counter of the UI ``handle`` points at.

    The callback holds only the weak ``handle``, so registering it on the UI doesn't
    keep the UI alive.
    '''
    def increment() -> None:
        ui = handle()
        if ui is None:
            raise StaleHandleError('counter UI was destroyed before its button callback fired')
        ui.set_counter(ui.get_counter() + 1)
    return increment

def build(
    config: Optional[ServeConfig] = None,
    *,
    factory: Callable[..., CounterUI] = CounterUI,
) -> CounterUI:
    try:
        ui = factory(config=config)
    except Exception as e:
        raise InitializationFailure(f'could not construct UI: {e}') from e
    ui.on_button_pressed(bind_increment(weakref.ref(ui)))
    return ui

def run_app(config: Optional[ServeConfig] = None) -> None:
    build(config).run()

def main() -> int:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    try:
        run_app()
    except FatalError as e:
        logger.critical('%s: %s', type(e).__name__, e, exc_info=True)
        return 1
    except KeyboardInterrupt:
        logger.info('interrupted; exiting')
    return 0
