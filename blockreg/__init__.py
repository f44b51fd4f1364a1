"""Block type registry: dense combined-id table plus state-variant expansion."""

from .blocks import MISSING_BLOCK, BlockDescriptor, is_missing, parse_block_name
from .errors import (
    BlockRegistryError,
    CapacityExceeded,
    DataOffsetError,
    DeclarationError,
    InvalidState,
    NotAddressable,
    UnsupportedOperation,
)
from .family import BlockFamily
from .kinds import BlockKind, available_kinds, get_kind
from .registry import BlockRegistry, combine_id, split_id
from .states import BoolAxis, EnumAxis, IntAxis, StateAxis

__all__ = [
    "MISSING_BLOCK",
    "BlockDescriptor",
    "BlockFamily",
    "BlockKind",
    "BlockRegistry",
    "BlockRegistryError",
    "BoolAxis",
    "CapacityExceeded",
    "DataOffsetError",
    "DeclarationError",
    "EnumAxis",
    "IntAxis",
    "InvalidState",
    "NotAddressable",
    "StateAxis",
    "UnsupportedOperation",
    "available_kinds",
    "combine_id",
    "get_kind",
    "is_missing",
    "parse_block_name",
    "split_id",
]
