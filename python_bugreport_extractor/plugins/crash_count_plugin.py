from collections import Counter
from typing import Dict

from python_bugreport_extractor.bugreport import BugreportParser
from python_bugreport_extractor.plugins import (
    BasePlugin,
    BugreportAnalysisContext,
    PluginResult,
)

CRASH_TYPES = (BugreportParser.ANR, BugreportParser.JAVA_CRASH, BugreportParser.NATIVE_CRASH)


class CrashCountPlugin(BasePlugin):
    """Counts ANRs, Java crashes and native crashes, and who they happened to"""

    def __init__(self):
        super().__init__(name="CrashCountPlugin", dependencies=None)
        self.counts: Dict[str, int] = {}
        self.culprits: Dict[str, Counter] = {}

    def version(self) -> str:
        return "1.0.0"

    def analyze(self, analysis_context: BugreportAnalysisContext) -> PluginResult:
        items = analysis_context.items
        self.counts = {crash_type: items.count(crash_type) for crash_type in CRASH_TYPES}
        self.culprits = {
            BugreportParser.ANR: Counter(
                item.get("app", "unknown") for item in items.items_of_type(BugreportParser.ANR)
            ),
            BugreportParser.JAVA_CRASH: Counter(
                item.get("exception", "unknown")
                for item in items.items_of_type(BugreportParser.JAVA_CRASH)
            ),
            BugreportParser.NATIVE_CRASH: Counter(
                item.get("app", "unknown")
                for item in items.items_of_type(BugreportParser.NATIVE_CRASH)
            ),
        }
        return PluginResult(
            self.counts, result_type="crash_counts", metadata={"culprits": self.culprits}
        )

    def report(self) -> str:
        lines = []
        for crash_type in CRASH_TYPES:
            lines.append(f"{crash_type}: {self.counts.get(crash_type, 0)}")
            for name, count in self.culprits.get(crash_type, Counter()).most_common():
                lines.append(f"  {name}: {count}")
        return "\n".join(lines)
