import importlib
import inspect
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from python_bugreport_extractor.bugreport.items import ItemList

logger = logging.getLogger(__name__)
plugin_dir = Path(__file__).parent


@dataclass
class PluginResult:
    """What a plugin found, kept on the analysis context under the plugin name"""

    data: Any
    result_type: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class BugreportAnalysisContext:
    """The parsed items of one bugreport, shared by every plugin of a run"""

    def __init__(self, items: Optional[ItemList] = None):
        self.items: ItemList = items if items is not None else ItemList()
        self.results: Dict[str, PluginResult] = {}

    def set_result(self, plugin_name: str, result: PluginResult):
        self.results[plugin_name] = result

    def get_result(self, plugin_name: str) -> Optional[PluginResult]:
        return self.results.get(plugin_name)

    def __repr__(self):
        return f"BugreportAnalysisContext(items={self.items.types()}, results={list(self.results)})"


class BasePlugin(ABC):
    def __init__(self, name: str, dependencies: Optional[List[str]] = None):
        """
        :param name: Unique identifier, used for lookups and dependencies.
        :param dependencies: Names of the plugins that must run before this one.
        """
        self.name = name
        self.dependencies = dependencies if dependencies is not None else []

    @abstractmethod
    def analyze(self, analysis_context: BugreportAnalysisContext) -> PluginResult:
        pass

    @abstractmethod
    def report(self) -> str:
        pass

    def run(self, analysis_context: BugreportAnalysisContext) -> None:
        analysis_context.set_result(self.name, self.analyze(analysis_context))


class PluginRepo:
    """
    Registry of the plugins found next to this module.
    Every `*_plugin.py` is imported once, its BasePlugin subclass instantiated,
    and the instances kept in dependency order.
    """

    _plugins: List[BasePlugin] = []
    _lock = threading.Lock()

    @classmethod
    def get_all(cls) -> List[BasePlugin]:
        with cls._lock:
            return cls._plugins.copy()

    @classmethod
    def find_by_name(cls, name: str) -> Optional[BasePlugin]:
        with cls._lock:
            return next((plugin for plugin in cls._plugins if plugin.name == name), None)

    @classmethod
    def run_all(cls, analysis_context: BugreportAnalysisContext) -> None:
        for plugin in cls.get_all():
            logger.debug("Running %s", plugin.name)
            plugin.run(analysis_context)

    @classmethod
    def report_all(cls) -> str:
        return "\n".join(plugin.report() for plugin in cls.get_all())

    @classmethod
    def load_plugins(cls):
        discovered: List[BasePlugin] = []
        for file_path in sorted(plugin_dir.glob("*_plugin.py")):
            module_name = f"{__name__}.{file_path.stem}"
            try:
                module = importlib.import_module(module_name)
            except ImportError as e:
                logger.error("Failed to load %s: %s", module_name, e)
                continue

            # One plugin per module; imported base classes don't count
            plugin_cls = next(
                (
                    member
                    for _, member in inspect.getmembers(module, inspect.isclass)
                    if issubclass(member, BasePlugin)
                    and member is not BasePlugin
                    and member.__module__ == module.__name__
                ),
                None,
            )
            if plugin_cls is None:
                logger.warning("No plugin class found in %s", module_name)
                continue
            discovered.append(plugin_cls())

        ordered = cls.resolve_execution_order(discovered)
        with cls._lock:
            cls._plugins = ordered
        logger.info("Loaded plugins: %s", [plugin.name for plugin in ordered])

    @staticmethod
    def resolve_execution_order(plugins: List[BasePlugin]) -> List[BasePlugin]:
        """
        Order plugins so that each one runs after its dependencies (depth-first
        topological sort).

        Raises:
            ValueError: on a circular dependency, or one that names an unknown plugin
        """
        by_name = {plugin.name: plugin for plugin in plugins}
        order: List[BasePlugin] = []
        # name -> False while being visited, True once placed in order
        state: Dict[str, bool] = {}

        def visit(plugin: BasePlugin):
            if plugin.name in state:
                if not state[plugin.name]:
                    raise ValueError(f"Circular dependency detected at {plugin.name}")
                return
            state[plugin.name] = False
            for dep_name in plugin.dependencies:
                if dep_name not in by_name:
                    raise ValueError(
                        f"Missing dependency: {dep_name} for plugin {plugin.name}"
                    )
                visit(by_name[dep_name])
            state[plugin.name] = True
            order.append(plugin)

        for plugin in plugins:
            visit(plugin)
        return order


PluginRepo.load_plugins()
