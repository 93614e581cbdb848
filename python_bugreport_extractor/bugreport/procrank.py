import logging
import re
from typing import Dict, List, Optional

from python_bugreport_extractor.bugreport.items import GenericMapItem
from python_bugreport_extractor.bugreport.section import BlockParser

logger = logging.getLogger(__name__)

# A memory amount, such as "12345K"
NUMBER_PATTERN = re.compile(r"(\d+)([BKMGbkmg])?")
# The underline above the procrank totals: "   ------  ------  ------"
TOTALS_SEPARATOR = re.compile(r"^\s*-{6}(?:\s+-{6})+\s*$")

UNIT_MULTIPLIERS = {
    "k": 1,
    "m": 1024,
    "g": 1024 * 1024,
}


def parse_mem(value: str) -> Optional[int]:
    """
    Convert a procrank memory amount to kilobytes.

    A bare number is already in kilobytes; B, K, M and G suffixes
    (in either case) are scaled accordingly.

    Returns:
        The amount in kB, or None if the value is not a memory amount.
    """
    match = NUMBER_PATTERN.fullmatch(value)
    if not match:
        return None

    count = int(match.group(1))
    suffix = match.group(2)
    if suffix is None:
        return count
    suffix = suffix.lower()
    if suffix == "b":
        return count // 1024
    return count * UNIT_MULTIPLIERS[suffix]


class ProcRankParser(BlockParser):
    """
    Parses the PROCRANK section into cmdline -> {column -> kB}.
    The column names are taken from the header line of each block.
    """

    SECTION_NAME = "PROCRANK"

    def parse_block(self, block, itemlist):
        output = GenericMapItem(self.SECTION_NAME)
        field_names: List[str] = []

        for line in block:
            line = line.strip()
            if not line:
                continue
            if not field_names:
                field_names = line.split()
                continue
            if TOTALS_SEPARATOR.match(line):
                # TOTAL and RAM summaries follow, none of them are processes
                break

            row = self._parse_row(line, field_names)
            if row is None:
                logger.warning("Failed to parse line '%s'", line)
                continue
            cmdline, values = row
            output[cmdline] = values

        itemlist.add_item(output)

    @staticmethod
    def _parse_row(line: str, field_names: List[str]):
        num_fields = len(field_names)
        fields = line.split(None, num_fields - 1)
        if len(fields) < num_fields:
            return None

        values: Dict[str, int] = {}
        for name, field in zip(field_names[:-1], fields[:-1]):
            amount = parse_mem(field)
            if amount is None:
                return None
            values[name] = amount
        return fields[-1], values
