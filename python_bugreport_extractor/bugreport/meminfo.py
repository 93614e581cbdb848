import logging
import re

from python_bugreport_extractor.bugreport.items import GenericMapItem
from python_bugreport_extractor.bugreport.section import BlockParser

logger = logging.getLogger(__name__)

# MemFree:           65420 kB
INFO_LINE = re.compile(r"^([^:]+):\s+(\d+) kB$")


class MemInfoParser(BlockParser):
    """Parses the MEMORY INFO section (a dump of /proc/meminfo) into label -> kB"""

    SECTION_NAME = "MEMORY INFO"

    def parse_block(self, block, itemlist):
        output = GenericMapItem(self.SECTION_NAME)

        for line in block:
            if not line.strip():
                continue
            if match := INFO_LINE.match(line):
                output[match.group(1)] = int(match.group(2))
            else:
                logger.warning("Failed to parse line '%s'", line)

        itemlist.add_item(output)
