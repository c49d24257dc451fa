"""
Tools package - registry and the built-in tool set.
"""

from .registry import BaseTool, ToolRegistry, ToolResult, create_default_registry

__all__ = ["BaseTool", "ToolRegistry", "ToolResult", "create_default_registry"]
