import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, TextIO

from python_bugreport_extractor.bugreport.correlators import (
    AnrCorrelator,
    JavaCrashCorrelator,
    NativeCrashCorrelator,
)
from python_bugreport_extractor.bugreport.items import ItemList
from python_bugreport_extractor.bugreport.section import BlockParser

logger = logging.getLogger(__name__)

# `logcat -v threadtime`, optionally with `-v uid`:
# 05-26 11:02:36.886  5689  5689 D AndroidRuntime: CheckJNI is OFF
# 08-16 10:01:30.003  1000  5098  5850 D LocalBluetoothAdapter: isSupportBluetoothRestrict = 0
THREADTIME_LINE = re.compile(
    r"^(\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3})\s+(?:(\w+)\s+)?(\d+)\s+(\d+)\s+([A-Z])\s+(.+?)\s*: ?(.*)$"
)
# `logcat -v time`:
# 06-04 02:32:14.002 D/dalvikvm(  236): GC_CONCURRENT freed 580K, 51% free
TIME_LINE = re.compile(
    r"^(\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3})\s+(\w)/(.+?)\(\s*(\d+)\): ?(.*)$"
)


@dataclass
class LogcatLine:
    timestamp: str
    uid: Optional[str]
    pid: int
    tid: int
    level: str
    tag: str
    message: str

    @classmethod
    def parse_line(cls, line: str) -> Optional["LogcatLine"]:
        """
        Parse a line in either the threadtime or the time format.
        The time format carries no thread id, so tid is 0 for those lines.
        """
        if match := THREADTIME_LINE.match(line):
            return cls(
                timestamp=match.group(1),
                uid=match.group(2),
                pid=int(match.group(3)),
                tid=int(match.group(4)),
                level=match.group(5),
                tag=match.group(6).strip(),
                message=match.group(7),
            )
        if match := TIME_LINE.match(line):
            return cls(
                timestamp=match.group(1),
                uid=None,
                pid=int(match.group(4)),
                tid=0,
                level=match.group(2),
                tag=match.group(3).strip(),
                message=match.group(5),
            )
        return None


class SystemLogParser(BlockParser):
    """
    Parses a block of logcat and forwards crash related lines to the correlators:
    DEBUG at level I for native crashes, AndroidRuntime at level E for Java
    crashes, and ActivityManager at any level for ANRs.
    """

    SECTION_NAME = "SYSTEM LOG"

    def parse_block(self, block, itemlist):
        java = JavaCrashCorrelator()
        native = NativeCrashCorrelator()
        anr = AnrCorrelator()

        for line in block:
            parsed = LogcatLine.parse_line(line)
            if parsed is None:
                logger.warning("Failed to parse line '%s'", line)
                continue

            if parsed.level == "I" and parsed.tag == "DEBUG":
                native.consume(parsed.pid, parsed.tid, parsed.message, itemlist)
            elif parsed.level == "E" and parsed.tag == "AndroidRuntime":
                java.consume(parsed.pid, parsed.tid, parsed.message, itemlist)
            elif parsed.tag == "ActivityManager":
                anr.consume(parsed.pid, parsed.tid, parsed.message, itemlist)

        java.commit(itemlist)
        native.commit(itemlist)
        anr.commit(itemlist)


class LogcatParser:
    """Extracts crash and ANR items from raw logcat text, outside of any bugreport"""

    def __init__(self):
        self._parser = SystemLogParser()

    def parse(self, lines: Iterable[str]) -> ItemList:
        itemlist = ItemList()
        block: List[str] = [line.rstrip("\r\n") for line in lines]
        self._parser.parse_block(block, itemlist)
        return itemlist

    def parse_reader(self, reader: TextIO) -> ItemList:
        return self.parse(reader)
