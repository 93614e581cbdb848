from python_bugreport_extractor.bugreport.bugreport_txt import (
    BugreportParser,
    BugreportReadError,
)
from python_bugreport_extractor.bugreport.correlators import (
    AnrCorrelator,
    JavaCrashCorrelator,
    NativeCrashCorrelator,
    SyslogCorrelator,
    encode_pid_tid,
)
from python_bugreport_extractor.bugreport.header import HeaderParser
from python_bugreport_extractor.bugreport.items import (
    BugreportHeaderItem,
    GenericMapItem,
    Item,
    ItemList,
)
from python_bugreport_extractor.bugreport.logcat import (
    LogcatLine,
    LogcatParser,
    SystemLogParser,
)
from python_bugreport_extractor.bugreport.meminfo import MemInfoParser
from python_bugreport_extractor.bugreport.procrank import ProcRankParser, parse_mem
from python_bugreport_extractor.bugreport.section import (
    BlockParser,
    NoopSectionParser,
    SectionRouter,
)
from python_bugreport_extractor.bugreport.sysprops import SystemPropParser
