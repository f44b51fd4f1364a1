from __future__ import annotations

import json
from pathlib import Path

import pytest

from blockreg.blocks import MISSING_BLOCK
from blockreg.errors import DeclarationError, InvalidState, UnsupportedOperation
from blockreg.loader import DEFAULT_DECLARATIONS, build_registry, load_declarations, register_declarations
from blockreg.models import BlockDeclaration
from blockreg.registry import BlockRegistry, combine_id


def _write(path: Path, blocks) -> Path:
    path.write_text(json.dumps({"blocks": blocks}), encoding="utf-8")
    return path


@pytest.fixture(scope="module")
def legacy() -> BlockRegistry:
    return build_registry(DEFAULT_DECLARATIONS)


def test_bundled_table_keeps_legacy_ids(legacy):
    assert legacy.lookup(combine_id(0, 0)).name == "air"
    assert legacy.lookup(combine_id(1, 0)).state == {"variant": "stone"}
    assert legacy.lookup(combine_id(1, 5)).model_name() == "andesite"
    assert legacy.lookup(combine_id(35, 14)).state == {"color": "red"}
    assert legacy.lookup(combine_id(53, 7)).state == {"facing": "north", "half": "top"}
    assert legacy.lookup(combine_id(67, 0)).name == "stone_stairs"
    assert len(legacy) == 68


def test_bundled_table_cull_flags(legacy):
    assert legacy.lookup(0).cull_against is False
    assert legacy.lookup(combine_id(20, 0)).cull_against is False
    assert legacy.lookup(combine_id(4, 0)).cull_against is True


def test_bundled_door_and_grass(legacy):
    door = legacy.family(64)
    assert len(door) == 64
    placed = [legacy.combined_id_of(b) for b in door if legacy.combined_id_of(b) is not None]
    assert sorted(c & 0xF for c in placed) == list(range(12))
    assert legacy.lookup(combine_id(64, 12)) is MISSING_BLOCK
    assert legacy.lookup(combine_id(2, 0)).state == {"snowy": False}
    assert legacy.lookup(combine_id(2, 1)) is MISSING_BLOCK


def test_bundled_int_axes(legacy):
    wire = legacy.lookup(combine_id(55, 15))
    assert wire.state == {"power": 15}
    assert wire.model_variant() == "power=15"
    assert legacy.lookup(combine_id(59, 8)) is MISSING_BLOCK


def test_explicit_axes_override_kind_defaults(tmp_path: Path):
    path = _write(
        tmp_path / "blocks.json",
        [
            {"name": "minecraft:stone"},
            {
                "name": "minecraft:oak_stairs",
                "kind": "stairs",
                "cull_against": False,
                "axes": [{"key": "half", "type": "enum", "values": ["bottom", "top"]}],
            },
        ],
    )
    registry = BlockRegistry()
    families = register_declarations(registry, load_declarations(path))
    registry.finalize()
    assert [f.id for f in families] == [0, 1]
    assert len(families[1]) == 2
    assert registry.lookup(combine_id(1, 4)).state == {"half": "top"}
    assert registry.lookup(combine_id(1, 1)) is MISSING_BLOCK


def test_bare_names_use_default_plugin():
    registry = BlockRegistry()
    register_declarations(registry, [BlockDeclaration(name="gadget")], default_plugin="mymod")
    registry.finalize()
    assert registry.lookup(0).identity() == ("mymod", "gadget")


def test_axes_on_plain_kind_are_rejected():
    registry = BlockRegistry()
    decl = BlockDeclaration(name="stone", axes=[{"key": "snowy", "type": "bool"}])
    with pytest.raises(UnsupportedOperation):
        register_declarations(registry, [decl])


@pytest.mark.parametrize(
    "blocks, message",
    [
        ([{"name": "minecraft:thing", "kind": "piston"}], "Unknown block kind"),
        ([{"name": "minecraft:thing", "kind": "stairs", "variants": ["a"]}], "invalid parameters"),
        ([{"name": "minecraft:thing", "kind": "variant"}], "invalid parameters"),
    ],
)
def test_bad_kind_declarations(tmp_path: Path, blocks, message):
    path = _write(tmp_path / "blocks.json", blocks)
    with pytest.raises(DeclarationError, match=message):
        build_registry(path)


@pytest.mark.parametrize(
    "blocks",
    [
        [{"name": "Minecraft:Stone"}],
        [{"name": "minecraft:stone", "colour": "red"}],
        [{"name": "minecraft:wool", "kind": "colored", "axes": [{"key": "color", "type": "enum"}]}],
        [{"name": "minecraft:wheat", "kind": "level", "axes": [{"key": "age", "type": "int", "start": 3}]}],
        [{"name": "minecraft:grass", "kind": "grass", "axes": [{"key": "snowy", "type": "bool", "values": ["x"]}]}],
    ],
)
def test_schema_violations_raise_declaration_error(tmp_path: Path, blocks):
    path = _write(tmp_path / "blocks.json", blocks)
    with pytest.raises(DeclarationError):
        load_declarations(path)


def test_missing_and_malformed_files(tmp_path: Path):
    with pytest.raises(DeclarationError, match="not found"):
        load_declarations(tmp_path / "nope.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{invalid", encoding="utf-8")
    with pytest.raises(DeclarationError, match="invalid JSON"):
        load_declarations(broken)


def test_duplicate_variants_are_rejected(tmp_path: Path):
    path = _write(tmp_path / "blocks.json", [{"name": "minecraft:thing", "kind": "variant", "variants": ["a", "a"]}])
    with pytest.raises(DeclarationError, match="must not repeat"):
        build_registry(path)


def test_rejected_axes_allocate_no_family():
    registry = BlockRegistry()
    decl = BlockDeclaration(
        name="minecraft:oak_stairs",
        kind="stairs",
        axes=[{"key": "half", "type": "enum", "values": ["bottom", "top"]}, {"key": "color", "type": "enum", "values": ["red"]}],
    )
    with pytest.raises(InvalidState):
        register_declarations(registry, [decl])
    assert len(registry) == 0
    assert registry.family(0) is None

    register_declarations(registry, [BlockDeclaration(name="minecraft:stone")])
    assert registry.family(0).default.name == "stone"
