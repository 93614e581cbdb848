import logging
import re

from python_bugreport_extractor.bugreport.items import GenericMapItem
from python_bugreport_extractor.bugreport.section import BlockParser

logger = logging.getLogger(__name__)

# [gsm.sim.operator.numeric]: []
PROP_LINE = re.compile(r"^\[(.*)\]: \[(.*)\]$")


class SystemPropParser(BlockParser):
    SECTION_NAME = "SYSTEM PROPERTIES"

    def parse_block(self, block, itemlist):
        output = GenericMapItem(self.SECTION_NAME)

        for line in block:
            if not line.strip():
                continue
            if match := PROP_LINE.match(line):
                output[match.group(1)] = match.group(2)
            else:
                logger.warning("Failed to parse line '%s'", line)

        itemlist.add_item(output)
