from typing import Dict

from python_bugreport_extractor.bugreport import MemInfoParser
from python_bugreport_extractor.plugins import (
    BasePlugin,
    BugreportAnalysisContext,
    PluginResult,
)

REPORTED_FIELDS = ("MemTotal", "MemFree", "Buffers", "Cached")


class MemInfoPlugin(BasePlugin):
    def __init__(self):
        super().__init__(name="MemInfoPlugin", dependencies=None)
        self.memory: Dict[str, int] = {}

    def version(self) -> str:
        return "1.0.0"

    def analyze(self, analysis_context: BugreportAnalysisContext) -> PluginResult:
        """Pick the headline numbers out of the MEMORY INFO section"""
        meminfo = analysis_context.items.first_item_of_type(MemInfoParser.SECTION_NAME)
        if meminfo is None:
            self.memory = {}
        else:
            self.memory = {key: meminfo[key] for key in REPORTED_FIELDS if key in meminfo}
        return PluginResult(self.memory, metadata={"description": "Memory info in kB"})

    def report(self) -> str:
        if not self.memory:
            return "Memory info: not available"
        return "Memory info: " + ", ".join(
            f"{key}={value} kB" for key, value in self.memory.items()
        )
