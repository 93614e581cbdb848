"""
Correlators rebuild multi-line crash and hang records from logcat messages.

Lines from unrelated events may be interleaved in the log, the only
guarantee is that a single logcat line never holds part of another line.
Java and native crashes are therefore demultiplexed by (pid, tid), while
ANRs rely on ActivityManager writing its reports serially.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from python_bugreport_extractor.bugreport.items import GenericMapItem, ItemList

logger = logging.getLogger(__name__)

# ANR (application not responding) in process: app
# ANR in app
# ANR in app (class/package)
ANR_START = re.compile(r"ANR (?:\(application not responding\) )?in (?:process: )?(\S+).*")
# 100% TOTAL: 52% user + 47% kernel + 0.1% iowait
ANR_END = re.compile(r"TOTAL: .*?[\d.]+% user \+ [\d.]+% kernel")

# java.lang.Exception
# java.lang.Exception: reason
JAVA_EXCEPTION = re.compile(r"^([^\s:]+)(?:: (.*))?$")

# *** *** *** *** *** *** *** *** *** *** *** *** *** *** *** ***
NATIVE_START = re.compile(r"^(?:\*\*\* ){15}\*\*\*$")
# Build fingerprint: 'fingerprint'
NATIVE_FINGERPRINT = re.compile(r"^Build fingerprint: '(.*)'$")
# pid: 957, tid: 963  >>> com.android.camera <<<
# pid: 957, tid: 963, name: CameraThread  >>> com.android.camera <<<
NATIVE_APP = re.compile(r"^pid: \d+, tid: \d+(?:, name: .*?)?  >>> (\S+) <<<$")


def encode_pid_tid(pid: int, tid: int) -> int:
    """
    Pack a pid and tid into one correlation key.
    Both are assumed to fit in 16 bits; larger ids may collide.
    """
    return (pid << 16) | tid


class SyslogCorrelator(ABC):
    @abstractmethod
    def consume(self, pid: int, tid: int, message: str, itemlist: ItemList) -> None:
        """Feed one logcat message attributed to (pid, tid)"""
        pass

    @abstractmethod
    def commit(self, itemlist: ItemList) -> None:
        """Signal the end of input, flushing every record still open"""
        pass


class AnrCorrelator(SyslogCorrelator):
    """
    Tracks a single ANR at a time. The record stays open until the CPU usage
    summary that closes the report, a new ANR start, or a line from another
    thread arrives.
    """

    SECTION_NAME = "ANR"

    def __init__(self):
        self._item: Optional[GenericMapItem] = None
        self._stack: List[str] = []
        self._pid = -1
        self._tid = -1

    def consume(self, pid, tid, message, itemlist):
        if match := ANR_START.match(message):
            logger.debug("Matched ANR start: %s", message)
            self.commit(itemlist)
            self._item = GenericMapItem(self.SECTION_NAME)
            self._item["app"] = match.group(1)
            self._pid = pid
            self._tid = tid
        elif self._item is None:
            return
        elif pid != self._pid or tid != self._tid:
            logger.warning(
                "Expected pid %d, tid %d, but got line from pid %d, tid %d; committing...",
                self._pid,
                self._tid,
                pid,
                tid,
            )
            self.commit(itemlist)
            return

        self._stack.append(message)

        if ANR_END.search(message):
            logger.debug("Matched ANR end: %s", message)
            self.commit(itemlist)

    def commit(self, itemlist):
        if self._item is None:
            return
        self._item["stack"] = "".join(line + "\n" for line in self._stack)
        itemlist.add_item(self._item)

        self._item = None
        self._stack = []
        self._pid = -1
        self._tid = -1


class KeyedCrashCorrelator(SyslogCorrelator):
    """
    Keeps one record per (pid, tid) key so that crashes from different
    threads can be told apart. Records are emitted on commit, in the order
    their keys were first seen.
    """

    SECTION_NAME = ""

    def __init__(self):
        # dicts keep insertion order, so the keys double as first-seen order
        self._items: Dict[int, GenericMapItem] = {}
        self._stacks: Dict[int, List[str]] = {}

    def _append(self, key: int, message: str) -> None:
        self._stacks.setdefault(key, []).append(message)

    def commit(self, itemlist):
        for key, item in self._items.items():
            item["stack"] = "".join(line + "\n" for line in self._stacks.get(key, []))
            itemlist.add_item(item)

        self._items = {}
        self._stacks = {}


class JavaCrashCorrelator(KeyedCrashCorrelator):
    SECTION_NAME = "JAVA CRASH"

    def consume(self, pid, tid, message, itemlist):
        key = encode_pid_tid(pid, tid)
        item = self._items.get(key)
        if item is None:
            item = self._items[key] = GenericMapItem(self.SECTION_NAME)

        if "exception" not in item and (match := JAVA_EXCEPTION.match(message)):
            item["exception"] = match.group(1)
            if match.group(2) is not None:
                item["reason"] = match.group(2)

        self._append(key, message)


class NativeCrashCorrelator(KeyedCrashCorrelator):
    SECTION_NAME = "NATIVE CRASH"

    def consume(self, pid, tid, message, itemlist):
        key = encode_pid_tid(pid, tid)

        if key not in self._items:
            # A record is only trusted when it starts with the banner
            if not NATIVE_START.match(message):
                logger.warning(
                    "Ignoring unexpected line from pid %d, tid %d: %s", pid, tid, message
                )
                return
            self._items[key] = GenericMapItem(self.SECTION_NAME)

        item = self._items[key]
        if match := NATIVE_FINGERPRINT.match(message):
            item["fingerprint"] = match.group(1)
        elif match := NATIVE_APP.match(message):
            item["app"] = match.group(1)

        self._append(key, message)
