import logging
import zipfile
import zlib
from pathlib import Path
from typing import Iterable, List, Pattern, TextIO, Tuple, Union

from python_bugreport_extractor.bugreport.header import HeaderParser
from python_bugreport_extractor.bugreport.items import ItemList
from python_bugreport_extractor.bugreport.logcat import SystemLogParser
from python_bugreport_extractor.bugreport.meminfo import MemInfoParser
from python_bugreport_extractor.bugreport.procrank import ProcRankParser
from python_bugreport_extractor.bugreport.section import (
    MEM_INFO_SECTION_REGEX,
    NOOP_SECTION_REGEX,
    PROCRANK_SECTION_REGEX,
    SYSTEM_LOG_SECTION_REGEX,
    SYSTEM_PROP_SECTION_REGEX,
    BlockParser,
    NoopSectionParser,
    SectionRouter,
)
from python_bugreport_extractor.bugreport.sysprops import SystemPropParser
from python_bugreport_extractor.utils import open_bugreport

logger = logging.getLogger(__name__)


class BugreportReadError(OSError):
    """The bugreport stream could not be read; no partial result is returned"""


class BugreportParser:
    """
    Parses the bugreport.txt produced by `adb bugreport` into an ItemList.

    Every parse builds a fresh router, so one instance can be reused for
    several bugreports, and separate instances can run on separate threads.
    """

    ANR = "ANR"
    JAVA_CRASH = "JAVA CRASH"
    NATIVE_CRASH = "NATIVE CRASH"

    def __init__(self, parse_header: bool = False):
        self.parse_header = parse_header
        self._extra_parsers: List[Tuple[BlockParser, Union[str, Pattern[str]]]] = []

    def add_section_parser(
        self, parser: BlockParser, start_pattern: Union[str, Pattern[str]]
    ) -> None:
        """Register a parser for an extra section, used by every later parse"""
        self._extra_parsers.append((parser, start_pattern))

    def parse(self, reader: TextIO) -> ItemList:
        """
        Parse a bugreport from a readable text stream.
        The caller owns the stream and is responsible for closing it.

        Raises:
            BugreportReadError: if reading the stream fails
        """
        router = self._create_router()
        itemlist = ItemList()
        try:
            for line in reader:
                router.parse_line(line.rstrip("\r\n"), itemlist)
        except OSError as e:
            raise BugreportReadError(f"Failed to read bugreport: {e}") from e

        # signal EOF
        router.commit(itemlist)
        logger.debug("Parsed bugreport: %s", itemlist.types())
        return itemlist

    def parse_lines(self, lines: Iterable[str]) -> ItemList:
        router = self._create_router()
        itemlist = ItemList()
        router.parse_block((line.rstrip("\r\n") for line in lines), itemlist)
        return itemlist

    def parse_file(self, path: Union[str, Path], encoding: str = "utf-8") -> ItemList:
        """
        Parse a bugreport*.txt, or a bugreport zip holding one.

        Raises:
            BugreportReadError: if the file is missing, unreadable, or a damaged or
                truncated bugreport zip
        """
        try:
            with open_bugreport(path, encoding) as reader:
                return self.parse(reader)
        except BugreportReadError:
            raise
        except (OSError, EOFError, zipfile.BadZipFile, zlib.error) as e:
            raise BugreportReadError(f"Failed to read bugreport {path}: {e}") from e

    def _create_router(self) -> SectionRouter:
        # The header isn't part of a section, so it needs an explicit initial parser
        router = SectionRouter(HeaderParser() if self.parse_header else None)
        router.add_section_parser(MemInfoParser(), MEM_INFO_SECTION_REGEX)
        router.add_section_parser(ProcRankParser(), PROCRANK_SECTION_REGEX)
        router.add_section_parser(SystemPropParser(), SYSTEM_PROP_SECTION_REGEX)
        router.add_section_parser(SystemLogParser(), SYSTEM_LOG_SECTION_REGEX)
        for parser, start_pattern in self._extra_parsers:
            router.add_section_parser(parser, start_pattern)

        # Unknown sections still have to end the section before them
        router.set_catch_all(NoopSectionParser(), NOOP_SECTION_REGEX)
        return router
