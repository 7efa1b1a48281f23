from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from yamlcst.parsers.types import ScalarFormat

INLINE_WS = (" ", "\t")
LINE_BREAKS = ("\n", "\r")

_SIMPLE_ESCAPES: Dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "\\": "\\",
    '"': '"',
    "/": "/",
    "r": "\r",
    "0": "\0",
    "a": "\x07",
    "b": "\b",
    "e": "\x1b",
    "v": "\v",
    "f": "\f",
    " ": " ",
    "_": "\xa0",
    "N": "\x85",
    "L": "\u2028",
    "P": "\u2029",
}

# escape letter -> number of hex digits
_HEX_ESCAPES: Dict[str, int] = {"x": 2, "u": 4, "U": 8}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class Chomping(str, Enum):
    CLIP = "clip"
    STRIP = "strip"
    KEEP = "keep"


# ----------------------------
# Line helpers
# ----------------------------

def consume_newline(text: str, pos: int) -> int:
    """Return the position after a \\r\\n, \\n or \\r at `pos` (or `pos` if none)."""
    if pos >= len(text):
        return pos
    if text[pos] == "\r" and text[pos + 1:pos + 2] == "\n":
        return pos + 2
    if text[pos] in LINE_BREAKS:
        return pos + 1
    return pos


def skip_inline_whitespace(text: str, pos: int) -> int:
    n = len(text)
    while pos < n and text[pos] in INLINE_WS:
        pos += 1
    return pos


def line_end(text: str, pos: int) -> int:
    n = len(text)
    while pos < n and text[pos] not in LINE_BREAKS:
        pos += 1
    return pos


def is_document_marker(text: str, pos: int) -> bool:
    if text[pos:pos + 3] not in ("---", "..."):
        return False
    after = text[pos + 3:pos + 4]
    return after == "" or after in INLINE_WS or after in LINE_BREAKS


# ----------------------------
# Quoted scalars
# ----------------------------

def _parse_hex(digits: str, width: int) -> Optional[int]:
    if len(digits) != width or not all(c in _HEX_DIGITS for c in digits):
        return None
    code = int(digits, 16)
    return code if code <= 0x10FFFF else None


def _read_quoted(text: str, pos: int, quote: str, limit: int) -> Tuple[str, int, bool]:
    parts: List[str] = []
    # literal blanks at the end of `parts`; escapes never count
    trailing_ws = 0
    pos += 1

    while pos < limit:
        ch = text[pos]

        if ch == quote:
            if quote == "'" and pos + 1 < limit and text[pos + 1] == "'":
                parts.append("'")
                pos += 2
                trailing_ws = 0
                continue
            return "".join(parts), pos + 1, True

        if quote == '"' and ch == "\\":
            nxt = text[pos + 1] if pos + 1 < limit else ""
            if nxt == "":
                parts.append("\\")
                pos += 1
            elif nxt in LINE_BREAKS:
                # escaped line break joins the lines without a space
                pos = skip_inline_whitespace(text, consume_newline(text, pos + 1))
            elif nxt in _HEX_ESCAPES:
                width = _HEX_ESCAPES[nxt]
                code = _parse_hex(text[pos + 2:min(pos + 2 + width, limit)], width)
                if code is None:
                    parts.append("\\" + nxt)
                    pos += 2
                else:
                    parts.append(chr(code))
                    pos += 2 + width
            else:
                parts.append(_SIMPLE_ESCAPES.get(nxt, "\\" + nxt))
                pos += 2
            trailing_ws = 0
            continue

        if ch in LINE_BREAKS:
            if trailing_ws:
                del parts[-trailing_ws:]
            trailing_ws = 0
            pos = consume_newline(text, pos)
            empty_lines = 0
            while pos < limit:
                pos = skip_inline_whitespace(text, pos)
                if pos < limit and text[pos] in LINE_BREAKS:
                    empty_lines += 1
                    pos = consume_newline(text, pos)
                else:
                    break
            parts.append("\n" * empty_lines if empty_lines else " ")
            continue

        trailing_ws = trailing_ws + 1 if ch in INLINE_WS else 0
        parts.append(ch)
        pos += 1

    return "".join(parts), min(pos, limit), False


def read_quoted(text: str, pos: int) -> Tuple[str, int]:
    """
    Read a single- or double-quoted scalar starting at the quote at `pos`.

    Returns (decoded value, end offset). Quoted scalars may span lines; line
    breaks fold to a space and blank lines to "\\n". An unterminated scalar
    is cut back to the end of its opening line so the rest of the document
    still parses.
    """
    quote = text[pos]
    value, end, closed = _read_quoted(text, pos, quote, len(text))
    if closed:
        return value, end

    first_line_end = line_end(text, pos)
    if end > first_line_end:
        value, end, _ = _read_quoted(text, pos, quote, first_line_end)
    return value, end


# ----------------------------
# Plain scalars
# ----------------------------

def is_mapping_colon(text: str, pos: int, in_flow: bool) -> bool:
    """`:` at `pos` separates a key from its value."""
    nxt = text[pos + 1:pos + 2]
    if nxt == "" or nxt in INLINE_WS or nxt in LINE_BREAKS:
        return True
    return in_flow and nxt in (",", "}", "]")


def read_plain(text: str, pos: int, *, in_flow: bool, colons_are_content: bool) -> Tuple[int, int]:
    """
    Scan one line of a plain scalar.

    Returns (end, stop): `end` excludes trailing blanks, `stop` is where
    scanning halted (a line break, an indicator, or a comment).
    """
    start = end = pos
    n = len(text)
    while pos < n:
        ch = text[pos]
        if ch in LINE_BREAKS:
            break
        if in_flow and ch in ",[]{}":
            break
        if ch == ":" and not colons_are_content and is_mapping_colon(text, pos, in_flow):
            break
        if ch == "#" and pos > start and text[pos - 1] in INLINE_WS:
            break
        pos += 1
        if ch not in INLINE_WS:
            end = pos
    return end, pos


# ----------------------------
# Block scalars
# ----------------------------

def is_block_scalar_header(text: str, pos: int) -> bool:
    """`|` or `>` at `pos` followed only by indicators, blanks and a comment."""
    p = pos + 1
    n = len(text)
    while p < n and (text[p] in "+-" or "1" <= text[p] <= "9"):
        p += 1
    p = skip_inline_whitespace(text, p)
    return p >= n or text[p] in LINE_BREAKS or text[p] == "#"


def _fold(lines: List[str]) -> str:
    out: List[str] = []
    last_more_indented = False
    in_empty_run = False
    seen_content = False

    for i, line in enumerate(lines):
        more_indented = bool(line) and line[0] in INLINE_WS
        if not line:
            out.append("\n")
            in_empty_run = True
            continue

        if i == 0:
            out.append(line)
        elif in_empty_run:
            # the blank lines already supplied the breaks, unless either side
            # is more indented
            if seen_content and (last_more_indented or more_indented):
                out.append("\n")
            out.append(line)
        elif more_indented or last_more_indented:
            out.append("\n")
            out.append(line)
        else:
            out.append(" ")
            out.append(line)

        last_more_indented = more_indented
        in_empty_run = False
        seen_content = True

    return "".join(out)


def _chomp(value: str, lines: List[str], trailing_newlines: int, chomping: Chomping) -> str:
    if trailing_newlines:
        value = value.rstrip("\n")
    has_content = any(line for line in lines)

    if chomping is Chomping.CLIP:
        return value + "\n" if has_content else value
    if chomping is Chomping.KEEP:
        if has_content:
            return value + "\n" * (trailing_newlines + 1)
        return "\n" * trailing_newlines
    return value


def read_block_scalar(text: str, pos: int, parent_indent: int) -> Tuple[str, int, ScalarFormat]:
    """
    Read a literal (`|`) or folded (`>`) block scalar whose header is at `pos`.

    `parent_indent` is the indentation of the owning key or dash; content must
    be indented deeper. The returned end offset sits at the start of the first
    line that is not part of the scalar (or at end of input).
    """
    n = len(text)
    style = text[pos]
    pos += 1

    explicit_indent = 0
    chomping = Chomping.CLIP
    # indentation and chomping indicators may come in either order
    for _ in range(2):
        if pos >= n:
            break
        c = text[pos]
        if "1" <= c <= "9" and not explicit_indent:
            explicit_indent = int(c)
        elif c == "-" and chomping is Chomping.CLIP:
            chomping = Chomping.STRIP
        elif c == "+" and chomping is Chomping.CLIP:
            chomping = Chomping.KEEP
        else:
            break
        pos += 1

    # rest of the header line is blanks and an optional comment
    pos = consume_newline(text, line_end(text, pos))

    content_indent: Optional[int] = parent_indent + explicit_indent if explicit_indent else None
    lines: List[str] = []
    trailing_newlines = 0

    while pos < n:
        start_of_line = pos
        indent = 0
        while pos < n and text[pos] == " ":
            indent += 1
            pos += 1

        if pos >= n or text[pos] in LINE_BREAKS:
            if content_indent is not None and indent >= content_indent:
                preserved = text[start_of_line + content_indent:pos]
                lines.append(preserved)
                trailing_newlines = 0 if preserved else trailing_newlines + 1
            else:
                lines.append("")
                trailing_newlines += 1
            pos = consume_newline(text, pos)
            continue

        if indent == 0 and is_document_marker(text, pos):
            pos = start_of_line
            break

        if content_indent is None:
            if indent <= parent_indent:
                pos = start_of_line
                break
            content_indent = indent

        if indent < content_indent:
            pos = start_of_line
            break

        pos = line_end(text, pos)
        lines.append(text[start_of_line + content_indent:pos])
        trailing_newlines = 0
        pos = consume_newline(text, pos)

    if style == "|":
        value = "\n".join(lines)
        fmt = ScalarFormat.LITERAL
    else:
        value = _fold(lines)
        fmt = ScalarFormat.FOLDED

    return _chomp(value, lines, trailing_newlines, chomping), pos, fmt
