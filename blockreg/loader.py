"""Apply declarative block data to a registry.

Which blocks exist is data, not code: a declaration file lists blocks in id
order, each with a kind and optionally the axes to expand.  Declarations
without axes expand every axis their kind declares, in the kind's order.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import ValidationError

from .blocks import DEFAULT_PLUGIN, BlockDescriptor, parse_block_name
from .errors import DeclarationError
from .family import BlockFamily
from .kinds import get_kind
from .models import BlockDeclaration, DeclarationFile
from .registry import BlockRegistry

LOG = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_DECLARATIONS = DATA_DIR / "legacy_blocks.json"


def load_declarations(path: Path) -> List[BlockDeclaration]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise DeclarationError(f"declaration file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise DeclarationError(f"{path}: invalid JSON: {exc}") from exc
    try:
        doc = DeclarationFile.model_validate(raw)
    except ValidationError as exc:
        raise DeclarationError(f"{path}: {exc}") from exc
    LOG.debug("loaded %d block declarations from %s", len(doc.blocks), path)
    return doc.blocks


def register_declaration(
    registry: BlockRegistry, decl: BlockDeclaration, *, default_plugin: str = DEFAULT_PLUGIN
) -> BlockFamily:
    params = dict(decl.params)
    if decl.variants is not None:
        params["variants"] = decl.variants
    try:
        kind = get_kind(decl.kind, **params)
        plugin, name = parse_block_name(decl.name, default_plugin)
        axes = [a.to_axis() for a in decl.axes] if decl.axes else kind.default_axes()
    except KeyError as exc:
        raise DeclarationError(f"{decl.name}: {exc.args[0]}") from exc
    except (TypeError, ValueError) as exc:
        raise DeclarationError(f"{decl.name}: invalid parameters for kind '{decl.kind}': {exc}") from exc

    # reject bad axes before an id is spent on the declaration
    for axis in axes:
        kind.check_axis(axis, list(axis.domain()))

    family = registry.allocate(
        BlockDescriptor(plugin, name, kind=kind, cull_against=decl.cull_against),
        supports_data=decl.supports_data,
    )
    for axis in axes:
        family.expand(axis)
    return family


def register_declarations(
    registry: BlockRegistry, decls: Iterable[BlockDeclaration], *, default_plugin: str = DEFAULT_PLUGIN
) -> List[BlockFamily]:
    return [register_declaration(registry, d, default_plugin=default_plugin) for d in decls]


def build_registry(path: Optional[Path] = None, *, default_plugin: str = DEFAULT_PLUGIN) -> BlockRegistry:
    """Load, register and finalize in one go; the result is ready for lookups."""
    path = path or DEFAULT_DECLARATIONS
    registry = BlockRegistry()
    register_declarations(registry, load_declarations(path), default_plugin=default_plugin)
    registry.finalize()
    return registry
