"""Split a raw input line into argument tokens.

Pure, stateless, never raises.

Rules
-----
* Whitespace outside a double-quoted span separates tokens.
* A double quote toggles quoting and is dropped from the output.
* Whitespace inside quotes is kept as part of the token.
* Empty segments between separators are discarded.
* An unterminated quote is treated as closed at end of line.
"""

from __future__ import annotations


def tokenize(line: str) -> list[str]:
    """Return the argument tokens of *line* (possibly empty)."""
    tokens: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char.isspace() and not in_quotes:
            if current:
                tokens.append("".join(current))
                current.clear()
        else:
            current.append(char)

    if current:
        tokens.append("".join(current))

    return tokens
