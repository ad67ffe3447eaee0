"""Documentation symbol index and MCP server for CerberusX .cerberusdoc files."""

__version__ = "0.1.0"
