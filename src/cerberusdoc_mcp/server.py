"""MCP server for cerberusdoc-mcp."""

import asyncio
import json
import logging
import os
import sys

from mcp.server import Server
from mcp.types import Tool, TextContent

from .tools.index_repo import index_repo
from .tools.index_folder import index_folder, reindex_file
from .tools.list_repos import list_repos
from .tools.get_file_outline import get_file_outline
from .tools.get_symbol import get_symbol, get_definition
from .tools.search_symbols import search_symbols
from .tools.get_completions import get_completions
from .tools.get_signature_help import get_signature_help
from .tools.analyze_document import parse_document, get_diagnostics

logger = logging.getLogger(__name__)

SYMBOL_KINDS = ["function", "method", "class", "interface", "property", "const", "global", "field", "keyword", "command"]

_REPO = {
    "type": "string",
    "description": "Repository identifier (owner/repo or just repo name)"
}

_CURSOR = {
    "text": {
        "type": "string",
        "description": "Text of the document the cursor is in"
    },
    "line": {
        "type": "integer",
        "description": "Zero-based cursor line",
        "default": 0
    },
    "character": {
        "type": "integer",
        "description": "Zero-based cursor character",
        "default": 0
    },
}


# Create server
server = Server("cerberusdoc-mcp")


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    return [
        Tool(
            name="index_repo",
            description="Index the .cerberusdoc files of a GitHub repository. Fetches files, extracts documented symbols, checks For/Next balance, and saves to local storage.",
            inputSchema={
                "type": "object",
                "properties": {
                    "url": {
                        "type": "string",
                        "description": "GitHub repository URL or owner/repo string"
                    },
                    "use_ai_summaries": {
                        "type": "boolean",
                        "description": "Use AI to summarize symbols without a description (requires ANTHROPIC_API_KEY). When false, uses descriptions or signature fallback.",
                        "default": True
                    }
                },
                "required": ["url"]
            }
        ),
        Tool(
            name="index_folder",
            description="Index a local folder of .cerberusdoc files (for example a CerberusX installation's docs). Walks the folder, extracts documented symbols, and saves to local storage.",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to local folder (absolute or relative, supports ~ for home directory)"
                    },
                    "use_ai_summaries": {
                        "type": "boolean",
                        "description": "Use AI to summarize symbols without a description (requires ANTHROPIC_API_KEY). When false, uses descriptions or signature fallback.",
                        "default": True
                    }
                },
                "required": ["path"]
            }
        ),
        Tool(
            name="reindex_file",
            description="Re-parse one document of an indexed folder or repository and replace its symbols.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO,
                    "file_path": {
                        "type": "string",
                        "description": "Path of the document within the index"
                    },
                    "content": {
                        "type": "string",
                        "description": "New document text. Read from the indexed folder when omitted."
                    }
                },
                "required": ["repo", "file_path"]
            }
        ),
        Tool(
            name="list_repos",
            description="List all indexed documentation sets.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="get_file_outline",
            description="Get all documented symbols in a file with line/character ranges, plus its diagnostics.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO,
                    "file_path": {
                        "type": "string",
                        "description": "Path to the file within the index (e.g., 'docs/graphics.cerberusdoc')"
                    }
                },
                "required": ["repo", "file_path"]
            }
        ),
        Tool(
            name="get_symbol",
            description="Hover information for a symbol: signature, description and every place it is documented. Give a name, or a document text and cursor position.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO,
                    "name": {
                        "type": "string",
                        "description": "Symbol name (case-insensitive)"
                    },
                    **_CURSOR,
                },
                "required": ["repo"]
            }
        ),
        Tool(
            name="get_definition",
            description="Locations (file and line/character range) where a symbol is documented. Give a name, or a document text and cursor position.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO,
                    "name": {
                        "type": "string",
                        "description": "Symbol name (case-insensitive)"
                    },
                    **_CURSOR,
                },
                "required": ["repo"]
            }
        ),
        Tool(
            name="search_symbols",
            description="Search for symbols matching a query across an indexed documentation set. Returns matches with signatures, summaries and locations.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO,
                    "query": {
                        "type": "string",
                        "description": "Search query (matches symbol names, signatures, summaries, descriptions)"
                    },
                    "kind": {
                        "type": "string",
                        "description": "Optional filter by symbol kind",
                        "enum": SYMBOL_KINDS
                    },
                    "file_pattern": {
                        "type": "string",
                        "description": "Optional glob pattern to filter files (e.g., 'docs/*.cerberusdoc')"
                    },
                    "max_results": {
                        "type": "integer",
                        "description": "Maximum number of results to return",
                        "default": 10
                    }
                },
                "required": ["repo", "query"]
            }
        ),
        Tool(
            name="get_completions",
            description="Completion items for a name prefix: documented symbols first, then identifiers found in the given text.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO,
                    "prefix": {
                        "type": "string",
                        "description": "Name prefix (case-insensitive)",
                        "default": ""
                    },
                    "text": {
                        "type": "string",
                        "description": "Optional document text to collect fallback identifiers from"
                    },
                    "token_regex": {
                        "type": "string",
                        "description": "Regex for fallback identifiers (default: identifiers of 3+ characters)"
                    },
                    "max_results": {
                        "type": "integer",
                        "description": "Maximum number of items to return",
                        "default": 50
                    }
                },
                "required": ["repo"]
            }
        ),
        Tool(
            name="get_signature_help",
            description="Signature of the call whose opening parenthesis is right before the cursor.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO,
                    **_CURSOR,
                },
                "required": ["repo", "text", "line", "character"]
            }
        ),
        Tool(
            name="parse_document",
            description="Extract documented symbols from raw .cerberusdoc text without indexing it.",
            inputSchema={
                "type": "object",
                "properties": {
                    "text": {
                        "type": "string",
                        "description": "Document text"
                    },
                    "uri": {
                        "type": "string",
                        "description": "Identifier copied onto every symbol",
                        "default": "untitled"
                    }
                },
                "required": ["text"]
            }
        ),
        Tool(
            name="get_diagnostics",
            description="Check For/Next balance in raw .cerberusdoc text.",
            inputSchema={
                "type": "object",
                "properties": {
                    "text": {
                        "type": "string",
                        "description": "Document text"
                    }
                },
                "required": ["text"]
            }
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    storage_path = os.environ.get("CERBERUSDOC_INDEX_PATH")

    try:
        if name == "index_repo":
            result = await index_repo(
                url=arguments["url"],
                use_ai_summaries=arguments.get("use_ai_summaries", True),
                storage_path=storage_path
            )
        elif name == "index_folder":
            result = index_folder(
                path=arguments["path"],
                use_ai_summaries=arguments.get("use_ai_summaries", True),
                storage_path=storage_path
            )
        elif name == "reindex_file":
            result = reindex_file(
                repo=arguments["repo"],
                file_path=arguments["file_path"],
                content=arguments.get("content"),
                storage_path=storage_path
            )
        elif name == "list_repos":
            result = list_repos(storage_path=storage_path)
        elif name == "get_file_outline":
            result = get_file_outline(
                repo=arguments["repo"],
                file_path=arguments["file_path"],
                storage_path=storage_path
            )
        elif name == "get_symbol":
            result = get_symbol(
                repo=arguments["repo"],
                name=arguments.get("name"),
                text=arguments.get("text"),
                line=arguments.get("line", 0),
                character=arguments.get("character", 0),
                storage_path=storage_path
            )
        elif name == "get_definition":
            result = get_definition(
                repo=arguments["repo"],
                name=arguments.get("name"),
                text=arguments.get("text"),
                line=arguments.get("line", 0),
                character=arguments.get("character", 0),
                storage_path=storage_path
            )
        elif name == "search_symbols":
            result = search_symbols(
                repo=arguments["repo"],
                query=arguments["query"],
                kind=arguments.get("kind"),
                file_pattern=arguments.get("file_pattern"),
                max_results=arguments.get("max_results", 10),
                storage_path=storage_path
            )
        elif name == "get_completions":
            result = get_completions(
                repo=arguments["repo"],
                prefix=arguments.get("prefix", ""),
                text=arguments.get("text"),
                token_regex=arguments.get("token_regex") or os.environ.get("CERBERUSDOC_TOKEN_REGEX"),
                max_results=arguments.get("max_results", 50),
                storage_path=storage_path
            )
        elif name == "get_signature_help":
            result = get_signature_help(
                repo=arguments["repo"],
                text=arguments["text"],
                line=arguments["line"],
                character=arguments["character"],
                storage_path=storage_path
            )
        elif name == "parse_document":
            result = parse_document(
                text=arguments["text"],
                uri=arguments.get("uri", "untitled")
            )
        elif name == "get_diagnostics":
            result = get_diagnostics(text=arguments["text"])
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except Exception as e:
        logger.exception("Tool %s failed", name)
        return [TextContent(type="text", text=json.dumps({"error": str(e)}, indent=2))]


async def run_server():
    """Run the MCP server."""
    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def main():
    """Main entry point."""
    # stdout carries the MCP stream, logs go to stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("CERBERUSDOC_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
