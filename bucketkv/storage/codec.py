"""
Line Codec Module

Escaping rules for the line-oriented on-disk format. Each entry is written as

    <escaped key>:<escaped value>

with the following substitutions applied to both key and value:

    ':'   -> '::'
    '\\n'  -> '\\' 'n'   (backslash followed by the letter n)
    '\\'   -> '\\' '\\'  (two backslashes)

The separator is the first colon on the line that is not part of a '::'
pair, found by walking the line once and tracking escape state.
"""

from typing import Optional, Tuple

SEPARATOR = ":"
LINE_BREAK = "\n"


def escape(text: str) -> str:
    """
    Escape a key or value so it can be embedded in a single line.

    Args:
        text: Raw string

    Returns:
        Escaped string containing no newline characters

    Examples:
        >>> escape("a:b")
        'a::b'
    """
    parts = []
    for char in text:
        if char == ":":
            parts.append("::")
        elif char == "\n":
            parts.append("\\n")
        elif char == "\\":
            parts.append("\\\\")
        else:
            parts.append(char)
    return "".join(parts)


def unescape(text: str) -> str:
    """
    Reverse escape().

    Unknown backslash sequences and lone colons are kept as-is so that
    hand-edited files still load.
    """
    parts = []
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        nxt = text[i + 1] if i + 1 < length else ""
        if char == "\\" and nxt == "n":
            parts.append("\n")
            i += 2
        elif char == "\\" and nxt == "\\":
            parts.append("\\")
            i += 2
        elif char == ":" and nxt == ":":
            parts.append(":")
            i += 2
        else:
            parts.append(char)
            i += 1
    return "".join(parts)


def find_separator(line: str) -> int:
    """
    Locate the key/value separator in an encoded line.

    Returns:
        Index of the first unescaped colon, or -1 if there is none
    """
    i = 0
    length = len(line)
    while i < length:
        char = line[i]
        nxt = line[i + 1] if i + 1 < length else ""
        if char == "\\" and nxt in ("n", "\\"):
            i += 2
        elif char == ":":
            if nxt == ":":
                i += 2
            else:
                return i
        else:
            i += 1
    return -1


def encode_line(key: str, value: str) -> str:
    """Encode one entry as a single line (without the trailing newline)."""
    return f"{escape(key)}{SEPARATOR}{escape(value)}"


def decode_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Decode one line back into a (key, value) pair.

    Args:
        line: A line produced by encode_line()

    Returns:
        (key, value) tuple, or None if the line has no separator
    """
    index = find_separator(line)
    if index < 0:
        return None
    return unescape(line[:index]), unescape(line[index + 1:])
