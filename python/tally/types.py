from typing import NewType

ElementId = NewType('ElementId', str)
TimeStep = NewType('TimeStep', int)
