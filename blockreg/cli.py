"""Inspect a block registry built from declaration data.

Usage (examples):
  python -m blockreg lookup 562
  python -m blockreg resolve "minecraft:oak_stairs[facing=north,half=top]"
  python -m blockreg --declarations my_blocks.json dump
  python -m blockreg serve --port 8765
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import uvicorn

from .blocks import BlockDescriptor, is_missing
from .errors import BlockRegistryError
from .loader import build_registry
from .registry import MAX_COMBINED_ID, BlockRegistry, split_id
from .settings import Settings

LOG = logging.getLogger("blockreg")


def _combined_id(raw: str) -> int:
    try:
        value = int(raw, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {raw}") from exc
    if not 0 <= value <= MAX_COMBINED_ID:
        raise argparse.ArgumentTypeError(f"combined id must be within 0..{MAX_COMBINED_ID}")
    return value


def _parse_args(argv: list[str], settings: Settings) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="blockreg", description="Query a block registry by combined id or state string")
    ap.add_argument(
        "--declarations",
        default=str(settings.declarations),
        help="Block declaration JSON (default: $BLOCKREG_DECLARATIONS or the bundled legacy table)",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("lookup", help="Print the block stored at a combined id (family << 4 | data)")
    p.add_argument("combined_id", type=_combined_id)

    p = sub.add_parser("resolve", help="Print the combined id of a block state string")
    p.add_argument("state")

    sub.add_parser("dump", help="Print every populated combined id")

    p = sub.add_parser("serve", help="Serve the registry over HTTP")
    p.add_argument("--host", default=settings.host)
    p.add_argument("--port", type=int, default=settings.port)
    return ap.parse_args(argv)


def _describe(cid: Optional[int], block: BlockDescriptor) -> str:
    if cid is None:
        where = "-"
    else:
        family_id, data = split_id(cid)
        where = f"{cid} ({family_id}:{data})"
    flags = " missing" if is_missing(block) else ""
    return f"{where}\t{block.state_string()}\tmodel={block.model_name()}#{block.model_variant()}{flags}"


def _serve(registry: BlockRegistry, settings: Settings, host: str, port: int) -> int:
    from .web import create_app

    uvicorn.run(create_app(registry, settings), host=host, port=port, log_level=settings.log_level.lower())
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    args = _parse_args(sys.argv[1:] if argv is None else argv, settings)
    try:
        registry = build_registry(Path(args.declarations), default_plugin=settings.default_plugin)
    except BlockRegistryError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1

    if args.command == "lookup":
        print(_describe(args.combined_id, registry.lookup(args.combined_id)))
        return 0
    if args.command == "resolve":
        block = registry.resolve(args.state, settings.default_plugin)
        if is_missing(block):
            print(f"[error] unknown block state: {args.state}", file=sys.stderr)
            return 1
        print(_describe(registry.combined_id_of(block), block))
        return 0
    if args.command == "dump":
        count = 0
        for cid, block in registry.placed():
            print(_describe(cid, block))
            count += 1
        LOG.info("dumped %d combined ids from %d families", count, len(registry))
        return 0
    return _serve(registry, settings, args.host, args.port)
