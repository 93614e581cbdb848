import logging
import re
from abc import ABC, abstractmethod
from typing import List, Optional, Pattern, Tuple, Union

from python_bugreport_extractor.bugreport.items import ItemList

logger = logging.getLogger(__name__)

MEM_INFO_SECTION_REGEX = r"------ MEMORY INFO .*"
PROCRANK_SECTION_REGEX = r"------ PROCRANK .*"
SYSTEM_PROP_SECTION_REGEX = r"------ SYSTEM PROPERTIES .*"
SYSTEM_LOG_SECTION_REGEX = r"------ SYSTEM LOG .*"
# Any other section start, or the "------ 0.1s was the duration of ..." trailer
NOOP_SECTION_REGEX = r"------ .*"


class BlockParser(ABC):
    """
    A parser that receives one complete block of lines and turns it into
    zero or more items. Implementations must tolerate malformed lines,
    since the bugreport format drifts between releases.
    """

    @abstractmethod
    def parse_block(self, block: List[str], itemlist: ItemList) -> None:
        """
        Parse a block of lines and store the results
        Args:
            block: the lines between this section's start line (exclusive)
                and the next section start or the end of input
            itemlist: where parsed items are committed
        """
        pass


class NoopSectionParser(BlockParser):
    def parse_block(self, block, itemlist):
        pass


class SectionRouter(BlockParser):
    """
    Splits a line stream into sections and hands every finished section to
    the parser registered for its start line.
    """

    def __init__(self, initial_parser: Optional[BlockParser] = None):
        self._parsers: List[Tuple[Pattern[str], BlockParser]] = []
        self._catch_all: Optional[Tuple[Pattern[str], BlockParser]] = None
        self._current_parser: Optional[BlockParser] = initial_parser
        self._block: List[str] = []

    def add_section_parser(
        self, parser: BlockParser, start_pattern: Union[str, Pattern[str]]
    ) -> None:
        """
        Register a parser for the sections whose first line fully matches start_pattern.
        Patterns are expected not to overlap; if they do, the earliest registration wins.
        """
        self._parsers.append((self._compile(start_pattern), parser))

    def set_catch_all(
        self, parser: BlockParser, start_pattern: Union[str, Pattern[str]]
    ) -> None:
        """Register the parser used when no other pattern matches a section start"""
        self._catch_all = (self._compile(start_pattern), parser)

    def retrieve(self, line: str) -> Optional[BlockParser]:
        for pattern, parser in self._parsers:
            if pattern.fullmatch(line):
                return parser
        if self._catch_all and self._catch_all[0].fullmatch(line):
            return self._catch_all[1]
        return None

    def parse_line(self, line: str, itemlist: ItemList) -> None:
        next_parser = self.retrieve(line)

        if next_parser is None:
            if self._current_parser is not None:
                self._block.append(line)
            else:
                logger.warning("Line outside of parsed section: %s", line)
            return

        # Switching parsers: flush the finished block, then rotate
        if self._current_parser is not None:
            self._current_parser.parse_block(self._block, itemlist)
        self._block = []

        logger.debug(
            "Switching parsers from %s to %s for line %s",
            type(self._current_parser).__name__ if self._current_parser else None,
            type(next_parser).__name__,
            line,
        )
        self._current_parser = next_parser

    def commit(self, itemlist: ItemList) -> None:
        """Signal the end of input, so the last section is not lost"""
        if self._current_parser is not None:
            self._current_parser.parse_block(self._block, itemlist)
        self._block = []

    def parse_block(self, block, itemlist):
        for line in block:
            self.parse_line(line, itemlist)
        self.commit(itemlist)

    @staticmethod
    def _compile(start_pattern: Union[str, Pattern[str]]) -> Pattern[str]:
        if isinstance(start_pattern, str):
            return re.compile(start_pattern)
        return start_pattern
