import unittest

from python_bugreport_extractor.bugreport import ItemList, MemInfoParser


class TestMemInfoParser(unittest.TestCase):
    def setUp(self):
        self.parser = MemInfoParser()
        self.itemlist = ItemList()

    def test_parse_block(self):
        block = [
            "MemTotal:         353332 kB",
            "MemFree:           65420 kB",
            "Buffers:           20800 kB",
            "Cached:            86204 kB",
            "SwapCached:            0 kB",
        ]
        self.parser.parse_block(block, self.itemlist)

        self.assertEqual(len(self.itemlist), 1)
        meminfo = self.itemlist.first_item_of_type("MEMORY INFO")
        self.assertEqual(
            list(meminfo.items()),
            [
                ("MemTotal", 353332),
                ("MemFree", 65420),
                ("Buffers", 20800),
                ("Cached", 86204),
                ("SwapCached", 0),
            ],
        )

    def test_malformed_lines_are_skipped(self):
        block = ["MemTotal:         353332 kB", "garbage", "MemFree: lots kB", ""]
        with self.assertLogs(
            "python_bugreport_extractor.bugreport.meminfo", level="WARNING"
        ) as logs:
            self.parser.parse_block(block, self.itemlist)

        self.assertEqual(len(logs.output), 2)
        self.assertEqual(dict(self.itemlist.first_item_of_type("MEMORY INFO")), {"MemTotal": 353332})

    def test_empty_block_still_emits_item(self):
        self.parser.parse_block([], self.itemlist)
        meminfo = self.itemlist.first_item_of_type("MEMORY INFO")
        self.assertIsNotNone(meminfo)
        self.assertEqual(len(meminfo), 0)

    def test_same_block_twice_is_equal(self):
        block = ["MemTotal:         353332 kB", "MemFree:           65420 kB"]
        self.parser.parse_block(block, self.itemlist)
        self.parser.parse_block(block, self.itemlist)

        first, second = self.itemlist.items_of_type("MEMORY INFO")
        self.assertEqual(first, second)
        self.assertIsNot(first, second)
