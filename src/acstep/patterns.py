# src/acstep/patterns.py
"""
Pattern list parser.

File format, one pattern per line:
    # comment lines and blank lines are skipped
    he
    she
    "  padded  "        quoted to keep surrounding whitespace
    "#not a comment"    quoted to start with '#'
    "tab\there"         \" \\ \n \t are decoded inside quotes

Unquoted lines are taken verbatim minus surrounding whitespace.
A quoted empty pattern ("") is rejected with InvalidPatternError.
"""

import re
from typing import List, Optional

from acstep.automaton import InvalidPatternError

_QUOTED_RE = re.compile(r'^"((?:[^"\\]|\\.)*)"$')
_ESCAPE_RE = re.compile(r'\\(.)')
_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}


def _unescape(body: str) -> str:
    def repl(m):
        ch = m.group(1)
        if ch not in _ESCAPES:
            raise ValueError(f"Unknown escape sequence \\{ch}")
        return _ESCAPES[ch]
    return _ESCAPE_RE.sub(repl, body)


def parse_pattern_line(line: str) -> Optional[str]:
    """
    Parse a single line. Returns None for blank and comment lines.
    Raises InvalidPatternError for an empty quoted pattern, ValueError on
    a malformed quoted pattern.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None

    if stripped.startswith('"'):
        m = _QUOTED_RE.match(stripped)
        if not m:
            raise ValueError(f"Unterminated or malformed quoted pattern: {stripped}")
        pattern = _unescape(m.group(1))
        if not pattern:
            raise InvalidPatternError("Empty quoted pattern", pattern=pattern)
        return pattern

    return stripped


def parse_patterns_text(data: str) -> List[str]:
    patterns = []
    for lineno, line in enumerate(data.splitlines(), start=1):
        try:
            pattern = parse_pattern_line(line)
        except InvalidPatternError as e:
            raise InvalidPatternError(f"line {lineno}: {e}", pattern=e.pattern, index=lineno) from e
        except ValueError as e:
            raise ValueError(f"line {lineno}: {e}") from e
        if pattern is not None:
            patterns.append(pattern)
    return patterns


def load_patterns_file(path: str) -> List[str]:
    """Read a pattern file (utf-8) and return its patterns in file order."""
    with open(path, "r", encoding="utf-8") as fh:
        data = fh.read()
    return parse_patterns_text(data)
