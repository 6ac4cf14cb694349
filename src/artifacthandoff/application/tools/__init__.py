"""Agent-facing tools."""

from artifacthandoff.application.tools.base import BaseTool, ToolContext, ToolResult
from artifacthandoff.application.tools.catalog import (
    GenerateCatalogPdfTool,
    SendCatalogPdfTool,
    create_catalog_tools,
)

__all__ = [
    "BaseTool",
    "ToolContext",
    "ToolResult",
    "GenerateCatalogPdfTool",
    "SendCatalogPdfTool",
    "create_catalog_tools",
]
