from datetime import datetime
from typing import Optional

from python_bugreport_extractor.bugreport import BugreportHeaderItem, HeaderParser
from python_bugreport_extractor.plugins import (
    BasePlugin,
    BugreportAnalysisContext,
    PluginResult,
)


class TimestampPlugin(BasePlugin):
    def __init__(self):
        super().__init__(name="TimestampPlugin", dependencies=None)
        self.timestamp: Optional[datetime] = None

    def version(self) -> str:
        return "1.0.0"

    def analyze(self, analysis_context: BugreportAnalysisContext) -> PluginResult:
        """Extract timestamp from the bugreport header, if it was parsed"""
        header: BugreportHeaderItem = analysis_context.items.first_item_of_type(
            HeaderParser.SECTION_NAME
        )
        self.timestamp = header.timestamp if header is not None else None
        return PluginResult(
            self.timestamp, metadata={"description": "Bugreport timestamp"}
        )

    def report(self) -> str:
        # Bugreport timestamp: 2024-08-16T10:02:11
        if self.timestamp is None:
            return "Bugreport timestamp: unknown"
        return f"Bugreport timestamp: {self.timestamp.isoformat()}"
