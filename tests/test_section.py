import unittest
from typing import List

from python_bugreport_extractor.bugreport import (
    BlockParser,
    ItemList,
    NoopSectionParser,
    SectionRouter,
)


class RecordingParser(BlockParser):
    def __init__(self):
        self.blocks: List[List[str]] = []

    def parse_block(self, block, itemlist):
        self.blocks.append(list(block))


class TestSectionRouter(unittest.TestCase):
    def setUp(self):
        self.parser_a = RecordingParser()
        self.parser_b = RecordingParser()
        self.catch_all = RecordingParser()
        self.router = SectionRouter()
        self.router.add_section_parser(self.parser_a, r"------ A .*")
        self.router.add_section_parser(self.parser_b, r"------ B .*")
        self.router.set_catch_all(self.catch_all, r"------ .*")
        self.itemlist = ItemList()

    def feed(self, lines):
        for line in lines:
            self.router.parse_line(line, self.itemlist)

    def test_one_delivery_per_activation(self):
        self.feed(
            [
                "------ A (first) ------",
                "a1",
                "a2",
                "------ B (only) ------",
                "b1",
                "------ A (second) ------",
                "a3",
            ]
        )
        self.assertEqual(self.parser_a.blocks, [["a1", "a2"]])
        self.assertEqual(self.parser_b.blocks, [["b1"]])

        self.router.commit(self.itemlist)
        self.assertEqual(self.parser_a.blocks, [["a1", "a2"], ["a3"]])
        self.assertEqual(self.parser_b.blocks, [["b1"]])
        self.assertEqual(self.catch_all.blocks, [])

    def test_boundary_lines_are_not_delivered(self):
        self.feed(["------ A (x) ------", "------ B (y) ------"])
        self.router.commit(self.itemlist)
        self.assertEqual(self.parser_a.blocks, [[]])
        self.assertEqual(self.parser_b.blocks, [[]])

    def test_lines_before_first_section_are_dropped(self):
        with self.assertLogs(
            "python_bugreport_extractor.bugreport.section", level="WARNING"
        ) as logs:
            self.feed(["== dumpstate: 2012-04-26 12:13:14", "------ A (x) ------", "a1"])
        self.router.commit(self.itemlist)

        self.assertIn("Line outside of parsed section", logs.output[0])
        self.assertEqual(self.parser_a.blocks, [["a1"]])

    def test_catch_all_only_used_without_specific_match(self):
        self.feed(
            [
                "------ A (x) ------",
                "a1",
                "------ CPU INFO (top) ------",
                "cpu",
                "------ 0.1s was the duration of 'CPU INFO' ------",
                "------ B (y) ------",
                "b1",
            ]
        )
        self.router.commit(self.itemlist)

        self.assertEqual(self.parser_a.blocks, [["a1"]])
        self.assertEqual(self.catch_all.blocks, [["cpu"], []])
        self.assertEqual(self.parser_b.blocks, [["b1"]])

    def test_patterns_must_match_whole_line(self):
        self.feed(["------ A (x) ------", "prefix ------ B (y) ------"])
        self.router.commit(self.itemlist)
        self.assertEqual(self.parser_a.blocks, [["prefix ------ B (y) ------"]])

    def test_initial_parser_receives_preamble(self):
        header = RecordingParser()
        router = SectionRouter(header)
        router.add_section_parser(self.parser_a, r"------ A .*")
        router.parse_block(["preamble", "------ A (x) ------", "a1"], self.itemlist)

        self.assertEqual(header.blocks, [["preamble"]])
        self.assertEqual(self.parser_a.blocks, [["a1"]])

    def test_commit_clears_buffer(self):
        self.feed(["------ A (x) ------", "a1"])
        self.router.commit(self.itemlist)
        self.router.commit(self.itemlist)
        self.assertEqual(self.parser_a.blocks, [["a1"], []])

    def test_noop_parser_adds_nothing(self):
        router = SectionRouter()
        router.set_catch_all(NoopSectionParser(), r"------ .*")
        router.parse_block(["------ X ------", "x1", "x2"], self.itemlist)
        self.assertEqual(len(self.itemlist), 0)
