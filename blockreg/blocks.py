from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Mapping, Optional, Tuple

from .errors import UnsupportedOperation
from .kinds import PLAIN, BlockKind
from .states import StateValue, format_state

if TYPE_CHECKING:
    from .family import BlockFamily

DEFAULT_PLUGIN = "minecraft"


def parse_block_name(name: str, default_plugin: str = DEFAULT_PLUGIN) -> Tuple[str, str]:
    """Split ``plugin:name``; bare names belong to ``default_plugin``."""
    name = name.strip()
    if ":" in name:
        plugin, _, rest = name.partition(":")
        if not plugin or not rest:
            raise ValueError(f"invalid block name: {name!r}")
        return plugin, rest
    if not name:
        raise ValueError("block name must not be empty")
    return default_plugin, name


class BlockDescriptor:
    """One concrete block state.

    ``plugin`` and ``name`` are fixed at construction; ``state`` is filled in
    by `BlockFamily.expand` only.  Equality is identity: two variants with the
    same name and state in different families are different blocks.
    """

    __slots__ = ("_plugin", "_name", "_kind", "_cull_against", "_family", "_state")

    def __init__(
        self,
        plugin: str,
        name: str,
        *,
        kind: BlockKind = PLAIN,
        cull_against: bool = True,
    ) -> None:
        self._plugin = plugin
        self._name = name
        self._kind = kind
        self._cull_against = cull_against
        self._family: Optional[BlockFamily] = None
        self._state: Dict[str, StateValue] = {}

    @classmethod
    def from_name(
        cls,
        name: str,
        *,
        kind: BlockKind = PLAIN,
        cull_against: bool = True,
        default_plugin: str = DEFAULT_PLUGIN,
    ) -> "BlockDescriptor":
        plugin, bare = parse_block_name(name, default_plugin)
        return cls(plugin, bare, kind=kind, cull_against=cull_against)

    @property
    def plugin(self) -> str:
        return self._plugin

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> BlockKind:
        return self._kind

    @property
    def cull_against(self) -> bool:
        return self._cull_against

    @property
    def family(self) -> Optional[BlockFamily]:
        return self._family

    @property
    def state(self) -> Mapping[str, StateValue]:
        return dict(self._state)

    def identity(self) -> Tuple[str, str]:
        return self._plugin, self._name

    def display_name(self) -> str:
        return f"{self._plugin}:{self._name}"

    def __str__(self) -> str:
        return self.display_name()

    def __repr__(self) -> str:
        return f"<BlockDescriptor {self.state_string()}>"

    def state_string(self) -> str:
        if not self._state:
            return self.display_name()
        return f"{self.display_name()}[{format_state(self._state)}]"

    def is_member(self, family: Optional[BlockFamily]) -> bool:
        return family is not None and self._family is family

    def model_name(self) -> str:
        return self._kind.model_name(self._name, self._state)

    def model_variant(self) -> str:
        return self._kind.model_variant(self._state)

    def data_offset(self) -> int:
        return self._kind.data_offset(self._state)

    def set_state(self, key: str, value: StateValue) -> None:
        self._kind.check(key, value)
        self._state[key] = value

    def clone(self) -> "BlockDescriptor":
        other = BlockDescriptor(self._plugin, self._name, kind=self._kind, cull_against=self._cull_against)
        other._family = self._family
        other._state = dict(self._state)
        return other

    def _attach(self, family: BlockFamily) -> None:
        self._family = family


class _MissingBlock(BlockDescriptor):
    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("steven", "missing_block", kind=PLAIN, cull_against=True)

    def __repr__(self) -> str:
        return "<MissingBlock>"

    def set_state(self, key: str, value: StateValue) -> None:
        raise UnsupportedOperation("the missing block sentinel is immutable")

    def clone(self) -> BlockDescriptor:
        raise UnsupportedOperation("the missing block sentinel cannot be cloned")

    def is_member(self, family: Optional[BlockFamily]) -> bool:
        return False

    def _attach(self, family: BlockFamily) -> None:
        raise UnsupportedOperation("the missing block sentinel cannot join a family")


MISSING_BLOCK: BlockDescriptor = _MissingBlock()


def is_missing(block: BlockDescriptor) -> bool:
    return block is MISSING_BLOCK
