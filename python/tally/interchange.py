from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence, Union
from typing_extensions import TypedDict

from . import element
from .types import ElementId, TimeStep

@dataclass(frozen=True)
class Interaction:
    target: ElementId
    type: str
    value: Optional[str] = None

    @classmethod
    def from_json(cls, j: Any) -> Interaction:
        '''Raises ValueError if ``j`` isn't a well-formed interaction body.'''
        if not isinstance(j, dict):
            raise ValueError('interaction must be a JSON object', j)
        unknown = set(j) - {'target', 'type', 'value'}
        if unknown:
            raise ValueError('unknown interaction fields', sorted(unknown))
        target, type_, value = j.get('target'), j.get('type'), j.get('value')
        if not isinstance(target, str) or not isinstance(type_, str):
            raise ValueError('interaction needs string "target" and "type"', j)
        if value is not None and not isinstance(value, str):
            raise ValueError('interaction "value" must be a string', j)
        return cls(target=ElementId(target), type=type_, value=value)

TextSpec = TypedDict('TextSpec', {'text': str})
ElementRefSpec = TypedDict('ElementRefSpec', {'ref': ElementId})
NodeSpec = TypedDict('NodeSpec', {
    'name': str,
    'attributes': Mapping[str, str],
    'children': Sequence[Any]
})
SubtreeJson = Union[TextSpec, ElementRefSpec, NodeSpec]

ElementDescription = TypedDict('ElementDescription', {'id': ElementId, 'subtree': SubtreeJson})
PollResponse = TypedDict('PollResponse', {
    'root': ElementId,
    'timeStep': TimeStep,
    'elements': Mapping[ElementId, ElementDescription],
})

def text_json(s: str) -> SubtreeJson:
    return TextSpec({'text': s})

def ref_json(e: element.Element) -> SubtreeJson:
    return ElementRefSpec({'ref': e.id})

def node_json(
    node_name: str,
    attributes: Mapping[str, str] = {},
    children: Sequence[Union[SubtreeJson, element.Element]] = (),
) -> SubtreeJson:
    return NodeSpec({
        'name': node_name,
        'attributes': dict(attributes),
        'children': [ref_json(c) if isinstance(c, element.Element) else c for c in children],
    })

def poll_response(root: element.Element, time_step: TimeStep, elements: Iterable[element.Element]) -> PollResponse:
    return PollResponse({
        'root': root.id,
        'timeStep': time_step,
        'elements': {
            e.id: ElementDescription({'id': e.id, 'subtree': e.subtree_json()})
            for e in elements
        },
    })
