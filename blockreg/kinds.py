"""Block kinds: the state payload each descriptor carries.

Every descriptor is the same record type; what differs between a stair and a
wool block is the kind it points at.  A kind declares which state keys it
accepts (and their value types), how a full state maps onto the legacy 4-bit
data field, and how the state is exposed to model lookup.

Data layouts follow the pre-flattening metadata values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import InvalidState, NotAddressable, UnsupportedOperation
from .states import BoolAxis, EnumAxis, IntAxis, StateAxis, StateValue, format_state, value_type_of

DATA_BITS = 4
MAX_DATA_OFFSET = (1 << DATA_BITS) - 1

COLORS = (
    "white",
    "orange",
    "magenta",
    "light_blue",
    "yellow",
    "lime",
    "pink",
    "gray",
    "light_gray",
    "cyan",
    "purple",
    "blue",
    "brown",
    "green",
    "red",
    "black",
)
WOODS = ("oak", "spruce", "birch", "jungle")
SLAB_VARIANTS = ("stone", "sand", "wood", "cobblestone", "brick", "stone_brick", "nether_brick", "quartz")

# Pre-flattening stairs: 0 east, 1 west, 2 south, 3 north (+4 => upside down).
STAIRS_FACING = ("east", "west", "south", "north")
# Pre-flattening torch: 1 east, 2 west, 3 south, 4 north, 5 up.
TORCH_FACING = {"east": 1, "west": 2, "south": 3, "north": 4, "up": 5}
# Pre-flattening doors, lower half: 0 east, 1 south, 2 west, 3 north.
DOOR_FACING = ("east", "south", "west", "north")
# Log rotation bits; 12 means "all bark".
LOG_AXIS_BITS = {"y": 0, "x": 4, "z": 8, "none": 12}


@dataclass(frozen=True)
class StateSlot:
    value_type: type
    allowed: Optional[Tuple[StateValue, ...]] = None

    @property
    def default(self) -> StateValue:
        if self.allowed:
            return self.allowed[0]
        return self.value_type()


def _enum(values: Sequence[str]) -> StateSlot:
    return StateSlot(str, tuple(values))


_BOOL = StateSlot(bool, (False, True))


class BlockKind:
    """A kind with no state: occupies data offset 0 and renders as ``normal``."""

    name = "plain"

    def __init__(self) -> None:
        self.slots: Dict[str, StateSlot] = {}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

    @property
    def has_state(self) -> bool:
        return bool(self.slots)

    def check(self, key: str, value: StateValue) -> None:
        if not self.has_state:
            raise UnsupportedOperation(f"{self.name} blocks have no state (tried to set {key}={value!r})")
        slot = self.slots.get(key)
        if slot is None:
            known = ", ".join(sorted(self.slots))
            raise InvalidState(f"{self.name} blocks have no state key {key!r}; known keys: {known}")
        try:
            vt = value_type_of(value)
        except TypeError as exc:
            raise InvalidState(f"{self.name}.{key}: {exc}") from exc
        if vt is not slot.value_type:
            raise InvalidState(
                f"{self.name}.{key} expects {slot.value_type.__name__}, got {vt.__name__} ({value!r})"
            )
        if slot.allowed is not None and value not in slot.allowed:
            raise InvalidState(f"{self.name}.{key}: {value!r} is not one of {list(slot.allowed)}")

    def check_axis(self, axis: StateAxis, values: Sequence[StateValue]) -> None:
        if not self.has_state:
            raise UnsupportedOperation(f"{self.name} blocks declare no state axes (got axis {axis.key!r})")
        slot = self.slots.get(axis.key)
        if slot is None:
            known = ", ".join(sorted(self.slots))
            raise InvalidState(f"{self.name} blocks have no state key {axis.key!r}; known keys: {known}")
        if axis.value_type is not slot.value_type:
            raise InvalidState(
                f"axis {axis.key!r} yields {axis.value_type.__name__}, "
                f"{self.name}.{axis.key} expects {slot.value_type.__name__}"
            )
        if not values:
            raise InvalidState(f"axis {axis.key!r} has an empty domain")
        for value in values:
            self.check(axis.key, value)

    def value(self, state: Mapping[str, StateValue], key: str) -> StateValue:
        if key in state:
            return state[key]
        return self.slots[key].default

    def default_axes(self) -> List[StateAxis]:
        return []

    def data_offset(self, state: Mapping[str, StateValue]) -> int:
        return 0

    def model_name(self, name: str, state: Mapping[str, StateValue]) -> str:
        return name

    def model_variant(self, state: Mapping[str, StateValue]) -> str:
        if not state:
            return "normal"
        return format_state(state)


class ColoredKind(BlockKind):
    """Sixteen dye colours, offset = colour index (wool, stained clay)."""

    name = "colored"

    def __init__(self) -> None:
        super().__init__()
        self.slots = {"color": _enum(COLORS)}

    def default_axes(self) -> List[StateAxis]:
        return [EnumAxis("color", COLORS)]

    def data_offset(self, state: Mapping[str, StateValue]) -> int:
        return COLORS.index(self.value(state, "color"))

    def model_name(self, name: str, state: Mapping[str, StateValue]) -> str:
        return f"{self.value(state, 'color')}_{name}"

    def model_variant(self, state: Mapping[str, StateValue]) -> str:
        return "normal"


class VariantKind(BlockKind):
    """A named sub-type stored directly as the data value (stone, dirt, planks)."""

    name = "variant"
    max_variants = MAX_DATA_OFFSET + 1

    def __init__(self, variants: Sequence[str]) -> None:
        super().__init__()
        variants = tuple(variants)
        if not variants:
            raise ValueError(f"{self.name} kind needs at least one variant")
        if len(variants) > self.max_variants:
            raise ValueError(f"{self.name} kind supports at most {self.max_variants} variants, got {len(variants)}")
        duplicates = sorted({v for v in variants if variants.count(v) > 1})
        if duplicates:
            raise ValueError(f"{self.name} kind has duplicate variants: {duplicates}")
        self.variants = variants
        self.slots = {"variant": _enum(variants)}

    def default_axes(self) -> List[StateAxis]:
        return [EnumAxis("variant", self.variants)]

    def data_offset(self, state: Mapping[str, StateValue]) -> int:
        return self.variants.index(self.value(state, "variant"))

    def model_name(self, name: str, state: Mapping[str, StateValue]) -> str:
        return str(self.value(state, "variant"))

    def model_variant(self, state: Mapping[str, StateValue]) -> str:
        return "normal"


class LogKind(VariantKind):
    name = "log"
    max_variants = 4

    def __init__(self, variants: Sequence[str] = WOODS) -> None:
        super().__init__(variants)
        self.slots["axis"] = _enum(tuple(LOG_AXIS_BITS))

    def default_axes(self) -> List[StateAxis]:
        return [EnumAxis("variant", self.variants), EnumAxis("axis", tuple(LOG_AXIS_BITS))]

    def data_offset(self, state: Mapping[str, StateValue]) -> int:
        return super().data_offset(state) | LOG_AXIS_BITS[self.value(state, "axis")]

    def model_name(self, name: str, state: Mapping[str, StateValue]) -> str:
        return f"{self.value(state, 'variant')}_{name}"

    def model_variant(self, state: Mapping[str, StateValue]) -> str:
        return f"axis={self.value(state, 'axis')}"


class SlabKind(VariantKind):
    name = "slab"
    max_variants = 8

    def __init__(self, variants: Sequence[str] = SLAB_VARIANTS) -> None:
        super().__init__(variants)
        self.slots["half"] = _enum(("bottom", "top"))

    def default_axes(self) -> List[StateAxis]:
        return [EnumAxis("variant", self.variants), EnumAxis("half", ("bottom", "top"))]

    def data_offset(self, state: Mapping[str, StateValue]) -> int:
        top = self.value(state, "half") == "top"
        return super().data_offset(state) | (8 if top else 0)

    def model_name(self, name: str, state: Mapping[str, StateValue]) -> str:
        return f"{self.value(state, 'variant')}_slab"

    def model_variant(self, state: Mapping[str, StateValue]) -> str:
        return f"half={self.value(state, 'half')}"


class StairsKind(BlockKind):
    name = "stairs"

    def __init__(self) -> None:
        super().__init__()
        self.slots = {"facing": _enum(STAIRS_FACING), "half": _enum(("bottom", "top"))}

    def default_axes(self) -> List[StateAxis]:
        return [EnumAxis("facing", STAIRS_FACING), EnumAxis("half", ("bottom", "top"))]

    def data_offset(self, state: Mapping[str, StateValue]) -> int:
        facing = STAIRS_FACING.index(self.value(state, "facing"))
        return facing | (4 if self.value(state, "half") == "top" else 0)


class TorchKind(BlockKind):
    name = "torch"

    def __init__(self) -> None:
        super().__init__()
        # standing torch first so it is the family default
        self.slots = {"facing": _enum(("up", "east", "west", "south", "north"))}

    def default_axes(self) -> List[StateAxis]:
        return [EnumAxis("facing", self.slots["facing"].allowed)]

    def data_offset(self, state: Mapping[str, StateValue]) -> int:
        return TORCH_FACING[self.value(state, "facing")]


class GrassKind(BlockKind):
    """Grass with a ``snowy`` flag that is derived from the block above, never stored."""

    name = "grass"

    def __init__(self) -> None:
        super().__init__()
        self.slots = {"snowy": _BOOL}

    def default_axes(self) -> List[StateAxis]:
        return [BoolAxis("snowy")]

    def data_offset(self, state: Mapping[str, StateValue]) -> int:
        if self.value(state, "snowy"):
            raise NotAddressable("snowy grass is not stored in block data")
        return 0


class DoorKind(BlockKind):
    """Two-block doors.

    The lower half stores facing and open; the upper half stores hinge and
    powered.  Everything else is reconstructed from the neighbouring half, so
    only 12 of the 16 data values are used.
    """

    name = "door"

    def __init__(self) -> None:
        super().__init__()
        self.slots = {
            "facing": _enum(DOOR_FACING),
            "half": _enum(("lower", "upper")),
            "hinge": _enum(("right", "left")),
            "open": _BOOL,
            "powered": _BOOL,
        }

    def default_axes(self) -> List[StateAxis]:
        return [
            EnumAxis("facing", DOOR_FACING),
            EnumAxis("half", ("lower", "upper")),
            EnumAxis("hinge", ("right", "left")),
            BoolAxis("open"),
            BoolAxis("powered"),
        ]

    def data_offset(self, state: Mapping[str, StateValue]) -> int:
        facing = self.value(state, "facing")
        hinge = self.value(state, "hinge")
        is_open = self.value(state, "open")
        powered = self.value(state, "powered")
        # an unexpanded key is not a duplicate of the other half
        if self.value(state, "half") == "lower":
            if ("hinge" in state and hinge != "right") or powered:
                raise NotAddressable("hinge/powered live in the upper half")
            return DOOR_FACING.index(facing) | (4 if is_open else 0)
        if ("facing" in state and facing != "north") or is_open:
            raise NotAddressable("facing/open live in the lower half")
        return 8 | (1 if hinge == "left" else 0) | (2 if powered else 0)


class LevelKind(BlockKind):
    """A single integer stored as the data value (redstone power, crop age, fluid level)."""

    name = "level"

    def __init__(self, key: str = "level", max_level: int = MAX_DATA_OFFSET) -> None:
        super().__init__()
        if not 0 <= max_level <= MAX_DATA_OFFSET:
            raise ValueError(f"max_level must be within 0..{MAX_DATA_OFFSET}, got {max_level}")
        self.key = key
        self.max_level = max_level
        self.slots = {key: StateSlot(int, tuple(range(max_level + 1)))}

    def default_axes(self) -> List[StateAxis]:
        return [IntAxis(self.key, start=0, stop=self.max_level)]

    def data_offset(self, state: Mapping[str, StateValue]) -> int:
        return int(self.value(state, self.key))


PLAIN = BlockKind()

KINDS: Dict[str, Callable[..., BlockKind]] = {
    "plain": BlockKind,
    "colored": ColoredKind,
    "variant": VariantKind,
    "log": LogKind,
    "slab": SlabKind,
    "stairs": StairsKind,
    "torch": TorchKind,
    "grass": GrassKind,
    "door": DoorKind,
    "level": LevelKind,
}


def available_kinds() -> List[str]:
    return sorted(KINDS)


def get_kind(name: str, **params) -> BlockKind:
    key = str(name).strip()
    if key not in KINDS:
        known = ", ".join(available_kinds())
        raise KeyError(f"Unknown block kind '{name}'. Known kinds: {known}")
    if key == "plain":
        if params:
            raise TypeError(f"kind 'plain' takes no parameters, got: {', '.join(sorted(params))}")
        return PLAIN
    try:
        return KINDS[key](**params)
    except TypeError as exc:
        raise TypeError(f"kind '{key}': {exc}") from exc
