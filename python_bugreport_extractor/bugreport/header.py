import logging
import re
from datetime import timedelta

from dateutil.parser import isoparse

from python_bugreport_extractor.bugreport.items import BugreportHeaderItem
from python_bugreport_extractor.bugreport.section import BlockParser

logger = logging.getLogger(__name__)

# == dumpstate: 2024-08-16 10:02:11
DUMPSTATE_LINE = re.compile(r"^== dumpstate: (.*)$")
# Build fingerprint: 'Xiaomi/houji_global/houji:14/UKQ1.230804.001/V816.0.12.0.UNCMIXM:user/release-keys'
FINGERPRINT_LINE = re.compile(r"^Build fingerprint: '(.*)'$")
# brand/product/device:release/build_id/incremental:type/tags
FINGERPRINT_FIELDS = re.compile(
    r"(?P<brand>[^/]*)/(?P<product>[^/]*)/(?P<device>[^/]*)/(?P<build_id>[^/]*)/"
    r"(?P<version>[^/:]*):(?P<build_type>[^/]*)/(?P<tags>[^/]*)"
)
# Uptime: up 0 weeks, 0 days, 0 hours, 32 minutes, load average: 21.65, 13.03, 5.53
UPTIME_LINE = re.compile(
    r"^Uptime: up (\d+) weeks?, (\d+) days?, (\d+) hours?, (\d+) minutes?\b.*$"
)


class HeaderParser(BlockParser):
    """
    Parses the dumpstate preamble, i.e. the lines before the first section.
    Only used when the router is asked to keep the header.
    """

    SECTION_NAME = "BUGREPORT"

    def parse_block(self, block, itemlist):
        fields = {}
        for line in block:
            line = line.strip()
            if match := DUMPSTATE_LINE.match(line):
                try:
                    fields["timestamp"] = isoparse(match.group(1))
                except ValueError as e:
                    logger.warning("Failed to parse dumpstate time '%s': %s", line, e)
            elif match := FINGERPRINT_LINE.match(line):
                fields["fingerprint"] = match.group(1)
                if parts := FINGERPRINT_FIELDS.fullmatch(match.group(1)):
                    fields["product"] = parts.group("product")
                    fields["version"] = parts.group("version")
                else:
                    logger.warning("Unrecognized build fingerprint '%s'", match.group(1))
            elif line.startswith("Uptime:"):
                if match := UPTIME_LINE.match(line):
                    weeks, days, hours, minutes = map(int, match.groups())
                    fields["uptime"] = timedelta(
                        weeks=weeks, days=days, hours=hours, minutes=minutes
                    )
                else:
                    logger.warning("Failed to parse line '%s'", line)

        itemlist.add_item(BugreportHeaderItem(**fields))
