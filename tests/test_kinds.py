import unittest

from blockreg.errors import NotAddressable
from blockreg.kinds import available_kinds, get_kind


class TestLegacyDataLayouts(unittest.TestCase):
    def test_stairs_facing_and_half(self):
        kind = get_kind("stairs")
        self.assertEqual(kind.data_offset({"facing": "east", "half": "bottom"}), 0)
        self.assertEqual(kind.data_offset({"facing": "north", "half": "bottom"}), 3)
        self.assertEqual(kind.data_offset({"facing": "south", "half": "top"}), 6)
        self.assertEqual(kind.model_variant({"facing": "south", "half": "top"}), "facing=south,half=top")

    def test_log_axis_bits(self):
        kind = get_kind("log")
        self.assertEqual(kind.data_offset({"variant": "birch", "axis": "y"}), 2)
        self.assertEqual(kind.data_offset({"variant": "spruce", "axis": "x"}), 5)
        self.assertEqual(kind.data_offset({"variant": "jungle", "axis": "z"}), 11)
        self.assertEqual(kind.data_offset({"variant": "oak", "axis": "none"}), 12)
        self.assertEqual(kind.model_name("log", {"variant": "birch"}), "birch_log")
        self.assertEqual(kind.model_variant({"axis": "x"}), "axis=x")

    def test_slab_top_bit(self):
        kind = get_kind("slab")
        self.assertEqual(kind.data_offset({"variant": "cobblestone", "half": "bottom"}), 3)
        self.assertEqual(kind.data_offset({"variant": "stone_brick", "half": "top"}), 13)
        self.assertEqual(kind.model_name("stone_slab", {"variant": "brick"}), "brick_slab")

    def test_torch_facings(self):
        kind = get_kind("torch")
        self.assertEqual(kind.data_offset({"facing": "up"}), 5)
        self.assertEqual(kind.data_offset({"facing": "east"}), 1)
        self.assertEqual(kind.default_axes()[0].values[0], "up")

    def test_missing_keys_use_slot_defaults(self):
        kind = get_kind("stairs")
        self.assertEqual(kind.data_offset({"half": "top"}), 4)
        self.assertEqual(get_kind("colored").data_offset({}), 0)

    def test_door_uses_twelve_slots(self):
        kind = get_kind("door")
        self.assertEqual(kind.data_offset({"facing": "north", "half": "lower", "open": True}), 7)
        self.assertEqual(kind.data_offset({"facing": "north", "half": "upper", "hinge": "left", "powered": True}), 11)
        with self.assertRaises(NotAddressable):
            kind.data_offset({"half": "lower", "hinge": "left"})
        with self.assertRaises(NotAddressable):
            kind.data_offset({"half": "upper", "facing": "east"})

        offsets = set()
        skipped = 0
        for facing in ("east", "south", "west", "north"):
            for half in ("lower", "upper"):
                for hinge in ("right", "left"):
                    for is_open in (False, True):
                        for powered in (False, True):
                            state = {"facing": facing, "half": half, "hinge": hinge, "open": is_open, "powered": powered}
                            try:
                                offsets.add(kind.data_offset(state))
                            except NotAddressable:
                                skipped += 1
        self.assertEqual(sorted(offsets), list(range(12)))
        self.assertEqual(skipped, 64 - 12)

    def test_snowy_grass_is_not_addressable(self):
        kind = get_kind("grass")
        self.assertEqual(kind.data_offset({"snowy": False}), 0)
        with self.assertRaises(NotAddressable):
            kind.data_offset({"snowy": True})

    def test_level_kind(self):
        kind = get_kind("level", key="age", max_level=7)
        axis = kind.default_axes()[0]
        self.assertEqual(axis.key, "age")
        self.assertEqual(list(axis.domain()), list(range(8)))
        self.assertEqual(kind.data_offset({"age": 6}), 6)
        with self.assertRaises(ValueError):
            get_kind("level", max_level=16)

    def test_variant_kind_limits(self):
        with self.assertRaises(ValueError):
            get_kind("variant", variants=[])
        with self.assertRaises(ValueError):
            get_kind("slab", variants=[f"v{i}" for i in range(9)])
        kind = get_kind("variant", variants=["dirt", "coarse_dirt", "podzol"])
        self.assertEqual(kind.data_offset({"variant": "podzol"}), 2)
        self.assertEqual(kind.model_name("dirt", {"variant": "podzol"}), "podzol")
        self.assertEqual(kind.model_variant({"variant": "podzol"}), "normal")

    def test_unknown_kind_lists_known_kinds(self):
        with self.assertRaises(KeyError) as ctx:
            get_kind("piston")
        self.assertIn("stairs", str(ctx.exception))
        self.assertIn("door", available_kinds())

    def test_plain_kind_is_shared(self):
        self.assertIs(get_kind("plain"), get_kind("plain"))
        self.assertFalse(get_kind("plain").has_state)

    def test_kind_parameters_are_checked(self):
        with self.assertRaisesRegex(TypeError, "plain"):
            get_kind("plain", x=1)
        with self.assertRaisesRegex(TypeError, "stairs"):
            get_kind("stairs", variants=["a"])
        with self.assertRaisesRegex(ValueError, "duplicate"):
            get_kind("variant", variants=["a", "b", "a"])

    def test_door_halves_without_expanded_facing(self):
        kind = get_kind("door")
        self.assertEqual(kind.data_offset({"half": "upper"}), 8)
        self.assertEqual(kind.data_offset({"half": "upper", "hinge": "left"}), 9)
        self.assertEqual(kind.data_offset({"half": "lower", "open": True}), 4)


if __name__ == "__main__":
    unittest.main()
