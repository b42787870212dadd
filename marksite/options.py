"""Front-matter options for marksite documents.

A document may start with an option block delimited by `%%` marker lines:

    %%
    title = Home
    style = theme.scss
    math = yes
    %%
    # Markdown body

The block is optional. Each non-blank line inside it is a `key = value`
assignment split on the first `=`; the last assignment of a key wins.

Key functions:
- parse_document: Split raw document text into options and body.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import MalformedOption, OptionParseError

MARKER = "%%"
DEFAULT_HIGHLIGHT_THEME = "default"


@dataclass
class DocumentOptions:
    """Options parsed from a document's front-matter block.

    Attributes:
        values: Raw option values keyed by name, in first-seen order.
    """

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.values.get(key, default)

    def __bool__(self) -> bool:
        return bool(self.values)

    @property
    def title(self) -> str | None:
        return self.values.get("title") or None

    @property
    def style(self) -> str | None:
        return self.values.get("style") or None

    @property
    def math(self) -> bool:
        return self.values.get("math") == "yes"

    @property
    def code(self) -> bool:
        """Whether fenced code blocks get syntax highlighting."""
        return bool(self.values.get("code"))

    @property
    def code_theme(self) -> str | None:
        """Highlight theme whose stylesheet is included in the page head.

        Only `code = yes` pulls in a theme stylesheet; any other non-empty
        value highlights code but leaves styling to the page's own CSS.
        """
        if self.values.get("code") != "yes":
            return None
        return self.values.get("highlight") or DEFAULT_HIGHLIGHT_THEME


@dataclass
class ParsedDocument:
    """A document split into its options and Markdown body."""

    options: DocumentOptions
    body: str


def _split_block(text: str) -> tuple[list[tuple[int, str]], str] | None:
    """Locate the option block and return its numbered lines plus the body.

    Returns None when the text does not start with a marker line.
    """
    if not text.startswith(MARKER + "\n"):
        return None
    lines = text.split("\n")
    for index in range(1, len(lines)):
        if lines[index] == MARKER:
            # The opening marker is line 1.
            block = list(enumerate(lines[1:index], start=2))
            body = "\n".join(lines[index + 1 :])
            return block, body
    raise OptionParseError(None, "option block opened with '%%' is never closed", line=1)


def _parse_assignment(number: int, line: str) -> tuple[str, str]:
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        raise MalformedOption(
            None,
            f"line {number}: expected 'key = value', got {line.strip()!r}",
            line=number,
        )
    return key, value.strip()


def parse_options(block: list[tuple[int, str]]) -> DocumentOptions:
    """Parse numbered option lines into DocumentOptions.

    Args:
        block: (line number, text) pairs between the two markers.

    Raises:
        MalformedOption: If a non-blank line has no `=` or an empty key.
    """
    values: dict[str, str] = {}
    for number, line in block:
        if not line.strip():
            continue
        key, value = _parse_assignment(number, line)
        values[key] = value
    return DocumentOptions(values)


def parse_document(text: str) -> ParsedDocument:
    """Split raw document text into options and Markdown body.

    Args:
        text: Document text with newlines normalized to `\\n`.

    Returns:
        ParsedDocument. Without an option block the options are empty and
        the body is the full text.

    Raises:
        OptionParseError: If the block is never closed.
        MalformedOption: If a line in the block is not an assignment.
    """
    split = _split_block(text)
    if split is None:
        return ParsedDocument(DocumentOptions(), text)
    block, body = split
    return ParsedDocument(parse_options(block), body)
