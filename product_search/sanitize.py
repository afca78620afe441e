"""Free-text search query sanitization for product search.

Turns untrusted search input into a bounded, normalized string that is safe
to hand to the query encoder. The filtering is pattern-based, not a SQL
parser: it strips comment markers, quote and escape metacharacters, literal
``OR 1=1`` style tautologies and a fixed keyword denylist. It is a
best-effort defense layer and does not replace bound parameters on the
server side.

Processing runs in two linear stages:

1. ``SANITIZE_RULES``: character-level patterns applied once, in order.
2. A token pass that drops standalone ``RISKY_KEYWORDS`` and
   ``<connective> 1=1`` tautologies. Removals are reduced against the
   tokens already emitted, so a removal that exposes another match
   (``or select 1=1``, ``or or 1=1 1=1``) is handled without rescanning.

Word boundaries are ASCII: only ``[A-Za-z0-9_]`` are word characters, so a
keyword glued to Cyrillic or accented letters (``молокоselect``) is still
standalone.
"""
from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MAX_LEN = 200

RISKY_KEYWORDS: Tuple[str, ...] = (
    "select",
    "union",
    "insert",
    "update",
    "delete",
    "drop",
    "alter",
    "create",
    "exec",
    "execute",
)

TAUTOLOGY_CONNECTIVES: Tuple[str, ...] = ("or", "and")

_KEYWORD_SET = frozenset(RISKY_KEYWORDS)
_CONNECTIVE_SET = frozenset(TAUTOLOGY_CONNECTIVES)

# Whitespace run, ASCII word run, or any single other character
_TOKEN_RE = re.compile(r"\s+|[A-Za-z0-9_]+|.", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")

_SPACE = " "


@dataclass(frozen=True)
class SanitizeRule:
    """A named pattern whose matches are replaced by ``replacement``.

    Matches become a space, so tokens on either side stay separate.
    """

    name: str
    pattern: re.Pattern[str]
    replacement: str = " "

    def apply(self, text: str) -> Tuple[str, int]:
        return self.pattern.subn(self.replacement, text)


SANITIZE_RULES: Tuple[SanitizeRule, ...] = (
    SanitizeRule("control_chars", re.compile(r"[\x00-\x1f\x7f]")),
    SanitizeRule("line_comment", re.compile(r"--[^\n\r]*")),
    # An unterminated block comment runs to the end of the string
    SanitizeRule("block_comment", re.compile(r"/\*.*?(?:\*/|\Z)", re.DOTALL)),
    SanitizeRule("stray_comment_close", re.compile(r"\*/")),
    SanitizeRule("metachars", re.compile(r"[;\"'`\\]")),
)


def _normalize_unicode(text: str) -> str:
    """NFKC-normalize ``text`` to fold homoglyphs and compatibility forms."""
    try:
        return unicodedata.normalize("NFKC", text)
    except Exception as e:
        logger.debug("NFKC normalization failed, using raw input: %s", e)
        return text


def _apply_rules(text: str) -> str:
    for rule in SANITIZE_RULES:
        text, _ = rule.apply(text)
    return text


def _push_space(out: List[str]) -> None:
    if out and out[-1] != _SPACE:
        out.append(_SPACE)


def _tautology_start(out: List[str]) -> int:
    """Index of the connective opening a ``<connective> (1 =`` tail of ``out``, or -1.

    Matches ``(or|and)\\s+[(\\s]*1\\s*=\\s*`` against the emitted tokens; the
    caller supplies the closing ``1``.
    """
    i = len(out) - 1
    if i >= 0 and out[i] == _SPACE:
        i -= 1
    if i < 0 or out[i] != "=":
        return -1
    i -= 1
    if i >= 0 and out[i] == _SPACE:
        i -= 1
    if i < 0 or out[i] != "1":
        return -1
    i -= 1
    while i >= 0 and out[i] in (_SPACE, "("):
        i -= 1
    # Whitespace must directly follow the connective
    if i < 0 or out[i].lower() not in _CONNECTIVE_SET or out[i + 1] != _SPACE:
        return -1
    return i


def _strip_keywords_and_tautologies(text: str) -> str:
    """Drop standalone keywords and literal 1=1 tautologies in one pass.

    Only the literal ``1=1`` comparison is recognized; other always-true
    expressions (``or 2=2``) pass through.
    """
    out: List[str] = []
    # Closing parentheses right after a removed tautology belong to it
    absorbing = False

    for tok in _TOKEN_RE.findall(text):
        while tok:
            if tok.isspace():
                _push_space(out)
                break
            if absorbing and tok == ")":
                break
            absorbing = False

            if tok[0] == "1":
                start = _tautology_start(out)
                if start >= 0:
                    del out[start:]
                    _push_space(out)
                    # 1=12 keeps the 2; 1=1select exposes select
                    tok = tok[1:]
                    absorbing = not tok
                    continue

            if tok.lower() in _KEYWORD_SET:
                _push_space(out)
            else:
                out.append(tok)
            break

    return "".join(out)


def _clean(text: str) -> str:
    s = _strip_keywords_and_tautologies(_apply_rules(text))
    return _WHITESPACE_RE.sub(" ", s).strip()


def sanitize_query(value: Optional[str], max_len: int = DEFAULT_MAX_LEN) -> str:
    """Sanitize a free-text search query.

    Args:
        value: Raw user input (may be None or empty)
        max_len: Maximum length of the result in code points

    Returns:
        Cleaned query, possibly empty. Never raises.
    """
    if not value:
        return ""

    raw = str(value)
    s = _clean(_normalize_unicode(raw))

    limit = max(0, int(max_len))
    if len(s) > limit:
        # Truncation can cut a word down to a keyword (selection -> select)
        s = _clean(s[:limit])

    if s != raw:
        logger.debug("Sanitized query from %d to %d chars", len(raw), len(s))
    return s
