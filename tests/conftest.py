from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from blockreg.blocks import BlockDescriptor  # noqa: E402
from blockreg.kinds import get_kind  # noqa: E402
from blockreg.registry import BlockRegistry  # noqa: E402
from blockreg.states import EnumAxis  # noqa: E402


@pytest.fixture()
def registry() -> BlockRegistry:
    return BlockRegistry()


@pytest.fixture()
def stone_and_wool(registry: BlockRegistry):
    stone = registry.allocate(BlockDescriptor("minecraft", "stone"))
    wool = registry.allocate(BlockDescriptor("minecraft", "wool", kind=get_kind("colored")))
    wool.expand(EnumAxis("color", get_kind("colored").slots["color"].allowed))
    registry.finalize()
    return registry, stone, wool
