"""Text helpers for the explain view: escape normalization and bold rendering."""

import re
from dataclasses import dataclass

# Literal two-character sequences that mark a pasted snippet as JSON-escaped
PASTE_TRIGGERS = ("\\n", "\\t", '\\"')

_TYPED_REPLACEMENTS = (
    ("\\n", "\n"),
    ("\\t", "\t"),
    ("\\r", "\r"),
    ('\\"', '"'),
)
# Backslash collapse must run last
_PASTED_REPLACEMENTS = _TYPED_REPLACEMENTS + (("\\\\", "\\"),)

# Fewer real newlines than this means the value probably arrived escaped
TYPED_NEWLINE_THRESHOLD = 3

# Bold spans never cross a line terminator (\r, U+2028, U+2029)
_BOLD_PATTERN = re.compile(r"(\*\*[^\r\u2028\u2029]*?\*\*)")


@dataclass(frozen=True)
class Segment:
    """A run of explanation text, optionally emphasized."""

    text: str
    bold: bool = False


def _replace_all(text: str, replacements: tuple[tuple[str, str], ...]) -> str:
    for old, new in replacements:
        text = text.replace(old, new)
    return text


def has_escaped_sequences(text: str) -> bool:
    """Check whether pasted text carries literal escape sequences.

    Args:
        text: Clipboard text.

    Returns:
        True if any of the literal sequences \\n, \\t or \\" is present.
    """
    return any(seq in text for seq in PASTE_TRIGGERS)


def unescape_pasted(text: str) -> str:
    """Unescape JSON-escaped text intercepted from a paste.

    Replaces \\n, \\t, \\r and \\" with their real characters, then collapses
    double backslashes.

    Args:
        text: Clipboard text.

    Returns:
        Unescaped text.
    """
    return _replace_all(text, _PASTED_REPLACEMENTS)


def normalize_typed(value: str) -> str:
    """Normalize an edited field value that looks escaped.

    The value is only rewritten when it contains a literal \\n and fewer than
    three real newlines, so ordinary multi-line code is left alone. Double
    backslashes are not collapsed on this path.

    Args:
        value: Full textarea value after the change.

    Returns:
        The value to store.
    """
    if "\\n" in value and value.count("\n") < TYPED_NEWLINE_THRESHOLD:
        return _replace_all(value, _TYPED_REPLACEMENTS)
    return value


def render_explanation(text: str) -> list[list[Segment]]:
    """Split explanation text into lines of plain and bold segments.

    Only **bold** spans are recognized, and a span never crosses a line break.

    Args:
        text: Explanation text from the service.

    Returns:
        One list of segments per line. Blank lines yield empty lists.
    """
    lines = []
    for line in text.split("\n"):
        segments = []
        for i, part in enumerate(_BOLD_PATTERN.split(line)):
            # re.split puts captured matches at odd indexes
            if i % 2 == 1:
                segments.append(Segment(text=part[2:-2], bold=True))
            elif part:
                segments.append(Segment(text=part))
        lines.append(segments)
    return lines
