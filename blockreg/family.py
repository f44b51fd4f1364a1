from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator, List, Optional

from .blocks import BlockDescriptor
from .states import StateAxis, StateValue

if TYPE_CHECKING:
    from .registry import BlockRegistry

LOG = logging.getLogger(__name__)


class BlockFamily:
    """All state variants of one block id.

    ``variants`` is never empty.  Before any expansion it holds the seed
    descriptor; ``expand`` replaces it with the cross product.
    """

    def __init__(
        self, family_id: int, initial: BlockDescriptor, *, supports_data: bool, registry: Optional["BlockRegistry"] = None
    ) -> None:
        self.id = family_id
        self.registry = registry
        self.supports_data = supports_data
        initial._attach(self)
        self.variants: List[BlockDescriptor] = [initial]

    def __repr__(self) -> str:
        return f"<BlockFamily {self.id} {self.default.display_name()} variants={len(self.variants)}>"

    def __len__(self) -> int:
        return len(self.variants)

    def __iter__(self) -> Iterator[BlockDescriptor]:
        return iter(self.variants)

    @property
    def default(self) -> BlockDescriptor:
        return self.variants[0]

    def expand(self, axis: StateAxis) -> "BlockFamily":
        values = list(axis.domain())
        # the seed kind is shared by every variant, so one check covers all of them
        self.default.kind.check_axis(axis, values)

        old = self.variants
        new: List[BlockDescriptor] = []
        for value in values:
            for variant in old:
                nb = variant.clone()
                nb.set_state(axis.key, value)
                new.append(nb)
        self.variants = new
        if self.registry is not None:
            self.registry.finalized = False
        LOG.debug("family %d (%s): %s x%d -> %d variants", self.id, self.default, axis.key, len(values), len(new))
        return self

    def find(self, **state: StateValue) -> Optional[BlockDescriptor]:
        for variant in self.variants:
            vs = variant.state
            if all(k in vs and vs[k] == v and type(vs[k]) is type(v) for k, v in state.items()):
                return variant
        return None
