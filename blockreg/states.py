"""Typed state values and the axes that enumerate them.

A state value is one of three tagged types: ``bool``, ``int`` or ``str``
(an enum member).  Each axis produces values of exactly one of those types,
so a kind can reject a mismatched axis before any variant is cloned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping, Tuple, Union

StateValue = Union[bool, int, str]
STATE_TYPES = (bool, int, str)


def value_type_of(value: StateValue) -> type:
    # bool is a subclass of int; exact type keeps the tags apart.
    t = type(value)
    if t not in STATE_TYPES:
        raise TypeError(f"unsupported state value type: {t.__name__}")
    return t


def format_value(value: StateValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_state(state: Mapping[str, StateValue]) -> str:
    return ",".join(f"{k}={format_value(state[k])}" for k in sorted(state))


@dataclass(frozen=True)
class StateAxis:
    key: str

    value_type = str

    def domain(self) -> Iterator[StateValue]:
        raise NotImplementedError


@dataclass(frozen=True)
class BoolAxis(StateAxis):
    value_type = bool

    def domain(self) -> Iterator[bool]:
        return iter((False, True))


@dataclass(frozen=True)
class IntAxis(StateAxis):
    start: int = 0
    stop: int = 15

    value_type = int

    def __post_init__(self) -> None:
        if self.stop < self.start:
            raise ValueError(f"axis {self.key!r}: stop {self.stop} < start {self.start}")

    def domain(self) -> Iterator[int]:
        return iter(range(self.start, self.stop + 1))


@dataclass(frozen=True)
class EnumAxis(StateAxis):
    values: Tuple[str, ...] = ()

    value_type = str

    def __post_init__(self) -> None:
        # accept any iterable of strings, keep a hashable tuple
        object.__setattr__(self, "values", tuple(self.values))
        if len(set(self.values)) != len(self.values):
            raise ValueError(f"axis {self.key!r}: duplicate values in {list(self.values)}")

    def domain(self) -> Iterator[str]:
        return iter(self.values)
