import unittest

from python_bugreport_extractor.bugreport import ItemList, SystemPropParser


class TestSystemPropParser(unittest.TestCase):
    def test_parse_block(self):
        itemlist = ItemList()
        SystemPropParser().parse_block(
            [
                "[dalvik.vm.dexopt-flags]: [m=y]",
                "[gsm.sim.operator.numeric]: []",
                "[ro.build.id]: [IMM76D]",
                "[ro.build.display.id]: [IMM76D: release keys]",
            ],
            itemlist,
        )

        props = itemlist.first_item_of_type("SYSTEM PROPERTIES")
        self.assertEqual(props["dalvik.vm.dexopt-flags"], "m=y")
        self.assertEqual(props["gsm.sim.operator.numeric"], "")
        self.assertEqual(props["ro.build.id"], "IMM76D")
        self.assertEqual(props["ro.build.display.id"], "IMM76D: release keys")

    def test_malformed_lines_are_skipped(self):
        itemlist = ItemList()
        with self.assertLogs(
            "python_bugreport_extractor.bugreport.sysprops", level="WARNING"
        ) as logs:
            SystemPropParser().parse_block(
                ["[ro.build.id]: [IMM76D]", "ro.secure=1", "[ro.debuggable]: 0"],
                itemlist,
            )

        self.assertEqual(len(logs.output), 2)
        self.assertEqual(
            dict(itemlist.first_item_of_type("SYSTEM PROPERTIES")),
            {"ro.build.id": "IMM76D"},
        )
