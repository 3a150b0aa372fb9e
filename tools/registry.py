"""
Tool registry with automatic discovery.

The registry discovers all MusicalTool subclasses under tools/ and provides
lookup by name. Adding a tool means dropping a module into tools/music/.
"""

import importlib
import inspect
import logging
import pkgutil

from tools.base import MusicalTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Registry for workshop tools with automatic discovery.

    Usage:
        registry = ToolRegistry()
        registry.discover()

        tool = registry.get("calculate_hole_positions")
        result = tool(length_mm=540.0, style="nelson-zink")
    """

    def __init__(self):
        self._tools: dict[str, MusicalTool] = {}

    def register(self, tool: MusicalTool) -> None:
        """
        Register a tool instance.

        Raises:
            ValueError: If tool with same name already registered
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool

    def get(self, name: str) -> MusicalTool | None:
        """Get tool by name, or None if not found."""
        return self._tools.get(name)

    def names(self) -> list[str]:
        """Registered tool names, sorted."""
        return sorted(self._tools)

    def list_tools(self) -> list[dict]:
        """
        List all registered tools.

        Returns:
            List of tool dicts (name, description, parameters), sorted by name
        """
        return [self._tools[name].to_dict() for name in self.names()]

    def discover(self, package_name: str = "tools") -> int:
        """
        Auto-discover all MusicalTool subclasses in package.

        Only classes defined in the scanned module are registered, so a tool
        imported by another module is not picked up twice.

        Args:
            package_name: Package to scan (default: "tools")

        Returns:
            Number of tools discovered
        """
        try:
            package = importlib.import_module(package_name)
        except ImportError:
            logger.warning("Tool package %s could not be imported", package_name)
            return 0

        if not hasattr(package, "__path__"):
            return 0

        count = 0
        for _finder, module_name, _is_pkg in pkgutil.walk_packages(
            package.__path__, prefix=f"{package_name}."
        ):
            try:
                module = importlib.import_module(module_name)
            except ImportError as exc:
                logger.warning("Skipping tool module %s: %s", module_name, exc)
                continue

            for _name, obj in inspect.getmembers(module, inspect.isclass):
                if obj is MusicalTool or obj.__module__ != module.__name__:
                    continue
                if issubclass(obj, MusicalTool) and not inspect.isabstract(obj):
                    self.register(obj())
                    count += 1

        logger.info("Discovered %d tools in %s", count, package_name)
        return count

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools


# Global registry instance
_registry: ToolRegistry | None = None


def get_registry() -> ToolRegistry:
    """
    Get global tool registry singleton.

    Auto-discovers tools on first call.
    """
    global _registry
    if _registry is None:
        _registry = ToolRegistry()
        _registry.discover()
    return _registry
