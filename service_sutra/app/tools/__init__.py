from .catalog import CATALOG_NAMES, TOOL_DEFINITIONS, get_tool_definitions
from .dispatcher import ToolDispatcher, ToolHandler, ToolResult

__all__ = [
    "CATALOG_NAMES",
    "TOOL_DEFINITIONS",
    "ToolDispatcher",
    "ToolHandler",
    "ToolResult",
    "get_tool_definitions",
]
