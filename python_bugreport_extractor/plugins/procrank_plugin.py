from pathlib import Path
from typing import Union

import matplotlib.pyplot as plt
import pandas as pd

from python_bugreport_extractor.bugreport import ProcRankParser
from python_bugreport_extractor.plugins import (
    BasePlugin,
    BugreportAnalysisContext,
    PluginResult,
)


class ProcrankPlugin(BasePlugin):
    """Ranks processes by Pss using the PROCRANK section"""

    def __init__(self, top_n: int = 10):
        super().__init__(name="ProcrankPlugin", dependencies=None)
        self.top_n = top_n
        self.frame = pd.DataFrame()

    def version(self) -> str:
        return "1.0.0"

    def analyze(self, analysis_context: BugreportAnalysisContext) -> PluginResult:
        procrank = analysis_context.items.first_item_of_type(ProcRankParser.SECTION_NAME)
        self.frame = self.to_frame(procrank or {})
        return PluginResult(
            self.frame, result_type="DataFrame", metadata={"description": "Procrank in kB"}
        )

    @staticmethod
    def to_frame(procrank) -> pd.DataFrame:
        """One row per cmdline, one column per procrank column, sorted by Pss"""
        if not procrank:
            return pd.DataFrame()
        frame = pd.DataFrame.from_dict(dict(procrank), orient="index")
        frame.index.name = "cmdline"
        if "Pss" in frame.columns:
            frame = frame.sort_values("Pss", ascending=False)
        return frame

    def report(self) -> str:
        if self.frame.empty:
            return "Procrank: not available"
        return f"Top {self.top_n} processes:\n{self.frame.head(self.top_n).to_string()}"

    def draw_pss_graph(self, output_path: Union[str, Path] = "pss.png") -> None:
        if self.frame.empty or "Pss" not in self.frame.columns:
            return
        top = self.frame.head(self.top_n)

        fig, ax = plt.subplots(figsize=(10, 4))
        ax.barh(list(top.index[::-1]), top["Pss"].iloc[::-1].tolist())

        ax.grid(True, axis="x")
        ax.set_title("Pss by process")
        ax.set_xlabel("Pss (kB)")
        fig.tight_layout()
        fig.savefig(output_path)
        plt.close(fig)
