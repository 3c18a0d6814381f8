from .config import ServeConfig
from .errors import FatalError, InitializationFailure, RunLoopFailure, StaleHandleError
from .gui import AbstractGUI, GUI
from .element import Container, Element, Text, Button
from .counter import CounterUI, RunState
from .server import serve_async, serve
from .app import bind_increment, build, run_app, main
