from __future__ import annotations

import itertools

from abc import ABC, abstractmethod
from typing import Callable, Iterator, Optional, Sequence, TypeVar, TYPE_CHECKING

from . import interchange
from .types import ElementId

if TYPE_CHECKING:
    from .gui import AbstractGUI

F = TypeVar('F', bound=Callable[[], None])

class Element(ABC):
    __nonces = itertools.count()
    def __init__(self) -> None:
        super().__init__()
        self._id = ElementId(str(next(self.__nonces)))
        self._parent: Optional[Element] = None
        self._gui: Optional[AbstractGUI] = None

    @property
    def id(self) -> ElementId:
        return self._id

    @property
    def parent(self) -> Optional[Element]:
        '''The element whose ``children`` include this one.

        Set by container elements when they adopt a child; end users should never need to set it.
        '''
        return self._parent
    @parent.setter
    def parent(self, parent: Optional[Element]) -> None:
        if (self._parent is not None) and (parent is not None):
            raise RuntimeError('cannot set parent of Element that already has a parent')
        self._parent = parent

    @property
    def children(self) -> Sequence[Element]:
        return ()

    def walk(self) -> Iterator[Element]:
        yield self
        for child in self.children:
            yield from child.walk()

    @property
    def gui(self) -> Optional[AbstractGUI]:
        if self.parent is not None:
            return self.parent.gui
        return self._gui
    @gui.setter
    def gui(self, gui: AbstractGUI) -> None:
        if self.parent is not None:
            raise RuntimeError('cannot set GUI of an Element that has a parent')
        self._gui = gui

    def mark_dirty(self, *, recursive: bool = False) -> None:
        '''Notify the GUI that owns this element (if there is one) that it needs re-rendering.'''
        gui = self.gui
        if gui is not None:
            gui.mark_dirty(self)
        if recursive:
            for child in self.children:
                child.mark_dirty(recursive=True)

    def handle_interaction(self, interaction: interchange.Interaction) -> None:
        pass

    @abstractmethod
    def subtree_json(self) -> interchange.SubtreeJson:
        pass

class Container(Element):
    def __init__(self, children: Sequence[Element] = ()) -> None:
        if not all(isinstance(child, Element) for child in children):
            raise TypeError("Container children must be Elements")
        super().__init__()
        self._children = tuple(children)
        for child in self._children:
            child.parent = self

    def __repr__(self) -> str:
        return f'Container({list(self._children)!r})'

    @property
    def children(self) -> Sequence[Element]:
        return self._children

    def subtree_json(self) -> interchange.SubtreeJson:
        return interchange.node_json('div', children=self._children)

class Text(Element):
    def __init__(self, text: str) -> None:
        super().__init__()
        if not isinstance(text, str):
            raise TypeError(text)
        self._text = text

    def __repr__(self) -> str:
        return f'Text({self.text!r})'

    @property
    def text(self) -> str:
        return self._text
    @text.setter
    def text(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(text)
        self._text = text
        self.mark_dirty()

    def subtree_json(self) -> interchange.SubtreeJson:
        return interchange.text_json(self.text)

class Button(Element):
    def __init__(self, text: str, callback: Optional[Callable[[], None]] = None) -> None:
        super().__init__()
        if not isinstance(text, str):
            raise TypeError(text)
        self._text = text
        self.callback = callback

    def __repr__(self) -> str:
        return f'Button(text={self.text!r}, callback={self.callback!r})'

    @property
    def text(self) -> str:
        return self._text
    @text.setter
    def text(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(text)
        self._text = text
        self.mark_dirty()

    def subtree_json(self) -> interchange.SubtreeJson:
        return interchange.node_json('button', children=[interchange.text_json(self._text)])

    def handle_interaction(self, interaction: interchange.Interaction) -> None:
        if interaction.type == 'click' and self.callback is not None:
            self.callback()

    def set_callback(self, f: F) -> F:
        '''Set the Button's ``callback``. Returns the same function, for use as a decorator.
            >>> button = Button("click")
            >>> @button.set_callback
            ... def callback():
            ...   print("Button was clicked!")
        '''
        self.callback = f
        return f
