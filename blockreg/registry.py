"""Family id allocation and the dense combined-id lookup table.

A combined id is ``family_id << 4 | data_offset``.  Registration
(`allocate`, `BlockFamily.expand`) and `finalize` run single-threaded at
start-up; after `finalize` the table is only read, and `lookup` needs no lock.
`finalize` builds a fresh table and swaps it in, so re-running the whole
registration sequence later only needs readers excluded by the caller.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from .blocks import DEFAULT_PLUGIN, MISSING_BLOCK, BlockDescriptor, parse_block_name
from .errors import CapacityExceeded, DataOffsetError, NotAddressable, UnsupportedOperation
from .family import BlockFamily
from .kinds import DATA_BITS, MAX_DATA_OFFSET
from .states import format_state

LOG = logging.getLogger(__name__)

FAMILY_CAPACITY = 0x100
TABLE_SIZE = 0x10000
MAX_COMBINED_ID = TABLE_SIZE - 1


def combine_id(family_id: int, offset: int) -> int:
    if not 0 <= family_id < TABLE_SIZE >> DATA_BITS:
        raise ValueError(f"family id out of range: {family_id}")
    if not 0 <= offset <= MAX_DATA_OFFSET:
        raise ValueError(f"data offset out of range: {offset}")
    return (family_id << DATA_BITS) | offset


def split_id(combined_id: int) -> Tuple[int, int]:
    if not 0 <= combined_id <= MAX_COMBINED_ID:
        raise ValueError(f"combined id out of range: {combined_id}")
    return combined_id >> DATA_BITS, combined_id & MAX_DATA_OFFSET


def canonical_state_string(state: str, default_plugin: str = DEFAULT_PLUGIN) -> str:
    """Normalise ``plugin:name[k=v,...]`` (any property order, optional plugin)."""
    state = state.strip()
    props: Dict[str, str] = {}
    name = state
    if "[" in state:
        if not state.endswith("]"):
            raise ValueError(f"invalid block state syntax: {state}")
        name, _, raw = state[:-1].partition("[")
        for segment in raw.split(","):
            segment = segment.strip()
            if not segment:
                continue
            if "=" not in segment:
                raise ValueError(f"invalid property segment '{segment}' in state '{state}'")
            k, v = segment.split("=", 1)
            key, value = k.strip(), v.strip()
            if not key or not value:
                raise ValueError(f"invalid property segment '{segment}' in state '{state}'")
            if key in props:
                raise ValueError(f"duplicate property '{key}' in state '{state}'")
            props[key] = value
    plugin, bare = parse_block_name(name, default_plugin)
    if not props:
        return f"{plugin}:{bare}"
    return f"{plugin}:{bare}[{format_state(props)}]"


class BlockRegistry:
    def __init__(self, capacity: int = FAMILY_CAPACITY) -> None:
        if not 0 < capacity <= FAMILY_CAPACITY:
            raise ValueError(f"capacity must be within 1..{FAMILY_CAPACITY}, got {capacity}")
        self.capacity = capacity
        self._next_id = 0
        self._families: List[Optional[BlockFamily]] = [None] * capacity
        self._table: List[Optional[BlockDescriptor]] = [None] * TABLE_SIZE
        self._placed: Dict[BlockDescriptor, int] = {}
        self._by_state: Dict[str, BlockDescriptor] = {}
        self.finalized = False

    def __len__(self) -> int:
        return self._next_id

    def __repr__(self) -> str:
        return f"<BlockRegistry families={self._next_id}/{self.capacity} finalized={self.finalized}>"

    def allocate(self, initial: BlockDescriptor, *, supports_data: Optional[bool] = None) -> BlockFamily:
        if initial is MISSING_BLOCK:
            raise UnsupportedOperation("the missing block sentinel cannot be registered")
        if initial.family is not None:
            raise UnsupportedOperation(f"{initial} already belongs to family {initial.family.id}")
        if self._next_id >= self.capacity:
            LOG.error("family table full (%d), cannot register %s", self.capacity, initial)
            raise CapacityExceeded(f"cannot register {initial}: all {self.capacity} family ids are in use")
        if supports_data is None:
            supports_data = initial.kind.has_state
        family = BlockFamily(self._next_id, initial, supports_data=supports_data, registry=self)
        self._families[family.id] = family
        self._next_id += 1
        self.finalized = False
        LOG.debug("allocated family %d for %s (supports_data=%s)", family.id, initial, supports_data)
        return family

    def family(self, family_id: int) -> Optional[BlockFamily]:
        if not 0 <= family_id < self.capacity:
            return None
        return self._families[family_id]

    def families(self) -> Iterator[BlockFamily]:
        for family in self._families:
            if family is not None:
                yield family

    def finalize(self) -> int:
        table: List[Optional[BlockDescriptor]] = [None] * TABLE_SIZE
        placed: Dict[BlockDescriptor, int] = {}
        by_state: Dict[str, BlockDescriptor] = {}
        skipped = 0

        def put(cid: int, block: BlockDescriptor) -> None:
            current = table[cid]
            if current is not None:
                raise DataOffsetError(
                    f"{block.state_string()} and {current.state_string()} both encode to combined id {cid}"
                )
            table[cid] = block
            placed[block] = cid
            key = block.state_string()
            if key in by_state:
                LOG.warning("state %s is registered more than once; keeping combined id %d", key, placed[by_state[key]])
            else:
                by_state[key] = block

        for family in self._families:
            if family is None or not family.variants:
                continue
            base = family.id << DATA_BITS
            if not family.supports_data:
                put(base, family.variants[0])
                continue
            for block in family.variants:
                try:
                    data = block.data_offset()
                except NotAddressable as exc:
                    skipped += 1
                    LOG.debug("family %d: skipping %s (%s)", family.id, block.state_string(), exc)
                    continue
                if not 0 <= data <= MAX_DATA_OFFSET:
                    raise DataOffsetError(f"{block.state_string()} encodes to data offset {data}, outside 0..{MAX_DATA_OFFSET}")
                put(base | data, block)

        self._table = table
        self._placed = placed
        self._by_state = by_state
        self.finalized = True
        LOG.info("finalized %d families into %d combined ids (%d variants not addressable)", self._next_id, len(placed), skipped)
        return len(placed)

    def lookup(self, combined_id: int) -> BlockDescriptor:
        if not 0 <= combined_id <= MAX_COMBINED_ID:
            return MISSING_BLOCK
        block = self._table[combined_id]
        if block is None:
            return MISSING_BLOCK
        return block

    def combined_id_of(self, block: BlockDescriptor) -> Optional[int]:
        return self._placed.get(block)

    def resolve(self, state: str, default_plugin: str = DEFAULT_PLUGIN) -> BlockDescriptor:
        try:
            key = canonical_state_string(state, default_plugin)
        except ValueError:
            return MISSING_BLOCK
        return self._by_state.get(key, MISSING_BLOCK)

    def placed(self) -> Iterator[Tuple[int, BlockDescriptor]]:
        for cid, block in enumerate(self._table):
            if block is not None:
                yield cid, block
