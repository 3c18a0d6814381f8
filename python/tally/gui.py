from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

from .element import Element, Container
from .interchange import PollResponse, poll_response
from .types import TimeStep

Listener = Callable[[], Any]

class AbstractGUI(ABC):
    @property
    @abstractmethod
    def root(self) -> Element:
        '''The element everything else hangs off of.'''

    @abstractmethod
    def mark_dirty(self, element: Element) -> None:
        '''Record that ``element`` needs re-rendering and tell every listener.'''

    @property
    @abstractmethod
    def time_step(self) -> TimeStep:
        '''How many times anything has been marked dirty, counting the initial render.'''

    @abstractmethod
    def render_poll_response(self, since: int = 0) -> PollResponse:
        '''Describe every element dirtied after time step ``since``.'''

    @abstractmethod
    def add_listener(self, listener: Listener) -> None:
        '''Call ``listener()`` after every :meth:`mark_dirty`.'''

    @abstractmethod
    def remove_listener(self, listener: Listener) -> None:
        '''Stop calling ``listener``. Does nothing if it isn't registered.'''

class GUI(AbstractGUI):
    '''An element tree plus the log of which elements changed when.

    Every :meth:`mark_dirty` appends to the log, so a time step is just a log
    position and "what changed since step n" is the log's tail.
    Not thread-safe.
    '''
    def __init__(self, *children: Element) -> None:
        self._root = Container(children)
        self._root.gui = self
        self._change_log: List[Element] = list(self._root.walk())
        self._listeners: List[Listener] = []

    @property
    def root(self) -> Element:
        return self._root

    @property
    def time_step(self) -> TimeStep:
        return TimeStep(len(self._change_log))

    def mark_dirty(self, element: Element) -> None:
        self._change_log.append(element)
        for listener in tuple(self._listeners):
            listener()

    def changed_since(self, since: int) -> List[Element]:
        '''Distinct elements dirtied after time step ``since``, oldest change first.'''
        distinct: Dict[str, Element] = {}
        for element in self._change_log[max(since, 0):]:
            distinct.setdefault(element.id, element)
        return list(distinct.values())

    def render_poll_response(self, since: int = 0) -> PollResponse:
        return poll_response(
            root=self.root,
            time_step=self.time_step,
            elements=self.changed_since(since),
        )

    def add_listener(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
