import unittest

from python_bugreport_extractor.bugreport import ItemList, ProcRankParser, parse_mem


class TestParseMem(unittest.TestCase):
    def test_units(self):
        self.assertEqual(parse_mem("87136K"), 87136)
        self.assertEqual(parse_mem("87136k"), 87136)
        self.assertEqual(parse_mem("1024K"), 1024)
        self.assertEqual(parse_mem("1M"), 1024)
        self.assertEqual(parse_mem("1048576B"), 1024)
        self.assertEqual(parse_mem("1G"), 1024 * 1024)
        self.assertEqual(parse_mem("2g"), 2 * 1024 * 1024)

    def test_bare_number_is_kilobytes(self):
        self.assertEqual(parse_mem("178"), 178)
        self.assertEqual(parse_mem("0"), 0)

    def test_bytes_round_down(self):
        self.assertEqual(parse_mem("1500B"), 1)
        self.assertEqual(parse_mem("512B"), 0)

    def test_not_a_number(self):
        self.assertIsNone(parse_mem("abc"))
        self.assertIsNone(parse_mem(""))
        self.assertIsNone(parse_mem("12T"))
        self.assertIsNone(parse_mem("-12K"))
        self.assertIsNone(parse_mem("12KB"))


class TestProcRankParser(unittest.TestCase):
    HEADER = "  PID      Vss      Rss      Pss      Uss  cmdline"

    def setUp(self):
        self.parser = ProcRankParser()
        self.itemlist = ItemList()

    def parse(self, block):
        self.parser.parse_block(block, self.itemlist)
        return self.itemlist.get_items()[-1]

    def test_parse_block(self):
        procrank = self.parse(
            [
                self.HEADER,
                "  178   87136K   81684K   52829K   50012K  system_server",
                " 1313   78128K   77996K   48603K   45812K  com.google.android.apps.maps",
            ]
        )

        self.assertEqual(procrank.type, "PROCRANK")
        self.assertEqual(
            list(procrank.keys()), ["system_server", "com.google.android.apps.maps"]
        )
        self.assertEqual(
            procrank["system_server"],
            {"PID": 178, "Vss": 87136, "Rss": 81684, "Pss": 52829, "Uss": 50012},
        )

    def test_cmdline_keeps_spaces(self):
        procrank = self.parse(
            [self.HEADER, "  95    1024K    512K    256K    128K  /system/bin/sh -c start"]
        )
        self.assertIn("/system/bin/sh -c start", procrank)

    def test_stops_at_totals(self):
        procrank = self.parse(
            [
                self.HEADER,
                "  178   87136K   81684K   52829K   50012K  system_server",
                "                          ------   ------  ------",
                "                          101432K   95824K  TOTAL",
                "",
                "RAM: 731448K total, 415804K free, 360K buffers",
            ]
        )
        self.assertEqual(list(procrank.keys()), ["system_server"])

    def test_malformed_rows_are_skipped(self):
        block = [
            self.HEADER,
            "  178   87136K   81684K   52829K   50012K  system_server",
            "  179   lotsK   81684K   52829K   50012K  broken",
            "  180   1024K",
            "  181    1024K    512K    256K    128K  zygote",
        ]
        with self.assertLogs(
            "python_bugreport_extractor.bugreport.procrank", level="WARNING"
        ) as logs:
            procrank = self.parse(block)

        self.assertEqual(len(logs.output), 2)
        self.assertEqual(list(procrank.keys()), ["system_server", "zygote"])

    def test_header_is_read_per_block(self):
        self.parse([self.HEADER, "  178   87136K   81684K   52829K   50012K  system_server"])
        procrank = self.parse(
            ["  PID      Pss  cmdline", "  178   52829K  system_server"]
        )
        self.assertEqual(procrank["system_server"], {"PID": 178, "Pss": 52829})

    def test_empty_block(self):
        procrank = self.parse([])
        self.assertEqual(len(procrank), 0)
        self.assertEqual(len(self.itemlist), 1)
