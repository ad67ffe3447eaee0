"""Documentation dialects: compiled patterns and the DocFormat stage definition."""

import re
from dataclasses import dataclass
from typing import Callable


@dataclass
class DocFormat:
    """One stage of the documentation format cascade."""
    # Stage name, used in logs and tests
    name: str

    # Extraction function: ParseContext -> list[DocSymbol]
    extract: Callable

    # Exclusive stages stop the cascade as soon as they yield a symbol.
    # Additive stages accumulate into the shared result list.
    exclusive: bool


# File extension to dialect mapping
DOC_EXTENSIONS = {
    ".cerberusdoc": "cerberusdoc",
}


# Only this many characters of a document are scanned. Everything past the
# bound is ignored, offsets inside the window stay valid.
MAX_DOCUMENT_CHARS = 1_000_000

# Whitespace runs in the patterns below never sit next to another quantifier
# that can match the same characters, so a failed match backtracks linearly.


IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"

KEYWORD_TYPES = ("Function", "Method", "Class", "Interface", "Property", "Const", "Global", "Field")


# Code fences, optionally tagged with the cerberusx language hint. Content
# starts on the line after the opening fence when the fence line is otherwise blank.
CODE_FENCE = re.compile(r"```(?:cerberusx)?(?:[ \t]*\r?\n)?(.*?)```", re.IGNORECASE | re.DOTALL)


# "# Function Name:ReturnType(args)" / "## Method Name(args)"
MARKDOWN_HEADER = re.compile(
    r"^#+[ \t]*(" + "|".join(KEYWORD_TYPES) + r")[ \t]+(" + IDENTIFIER + r")"
    r"[ \t]*([:(][^\r\n]*)?\r?$",
    re.IGNORECASE | re.MULTILINE,
)

# Any header line, ends a Markdown description paragraph
HEADER_LINE = re.compile(r"^[ \t]*#")


# "Language: ...\n> Keyword Name" (workspace keyword docs)
LANGUAGE_KEYWORD = re.compile(
    r"Language:[ \t]*[\r\n]\s*>\s*(\w+)\s+(" + IDENTIFIER + r")",
    re.IGNORECASE,
)

# "> Keyword Name" at the very start of the text (installation keyword docs)
LEADING_KEYWORD = re.compile(r"\s*>\s*(\w+)\s+(" + IDENTIFIER + r")", re.IGNORECASE)

# ">> Syntax" / ">> Description" sections run to the next ">>" or end of text
SYNTAX_SECTION = re.compile(r">>\s*Syntax\s*(.*?)(?:>>|\Z)", re.IGNORECASE | re.DOTALL)
DESCRIPTION_SECTION = re.compile(r">>\s*Description\s*(.*?)(?:>>|\Z)", re.IGNORECASE | re.DOTALL)

ITALIC_MARKER = re.compile(r"\*([^*]+)\*")


# Front-matter blocks between two "---" lines
FRONT_MATTER = re.compile(r"^---[ \t]*\r?\n(.*?)^---[ \t]*\r?$", re.MULTILINE | re.DOTALL)

FRONT_MATTER_NAME = re.compile(r"^[ \t]*name[ \t]*:[ \t]*(\S[^\r\n]*)", re.IGNORECASE | re.MULTILINE)
FRONT_MATTER_SIGNATURE = re.compile(r"^[ \t]*signature[ \t]*:[ \t]*(\S[^\r\n]*)", re.IGNORECASE | re.MULTILINE)
FRONT_MATTER_DESCRIPTION = re.compile(
    r"^[ \t]*description[ \t]*:[ \t]*(\S.*)",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)


# "command: Name(sig) - description" / "Name(sig) : description" anywhere in the text
INLINE_LINE = re.compile(
    r"^(?:command[ \t]*:[ \t]*)?(" + IDENTIFIER + r")[ \t]*(\([^)\r\n]*\)[ \t]*)?[-:]([^\r\n]*)\r?$",
    re.IGNORECASE | re.MULTILINE,
)

# Single trimmed line inside a code fence, separator optional
COMMAND_LINE = re.compile(r"(" + IDENTIFIER + r")(\s*\([^)]*\))?\s*[-:]?\s*(.*)")


# Cursor helpers
WORD_BEFORE_CURSOR = re.compile(r"(?<![A-Za-z0-9_])(" + IDENTIFIER + r")\Z")
CALL_BEFORE_CURSOR = re.compile(r"(" + IDENTIFIER + r")\s*\(\Z")

LINE_BREAK = re.compile(r"\r?\n")


# For/Next balance checks
FOR_OPEN = re.compile(r"For\b", re.IGNORECASE)
FOR_CLOSE = re.compile(r"(Next|End\s+For|End)\b", re.IGNORECASE)

NUMERIC_TOKEN = re.compile(r"[0-9]+")
