"""
Exclude-regex handling.

Configurations written for the PHP plugin carry PCRE patterns with
delimiters and trailing modifiers (``#/tests?/#i``, ``~vendor~``). Those
are rewritten into Python ``re`` syntax; bare patterns pass through.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# Modifiers with a Python inline-flag equivalent; "u" is implicit for str patterns
_PCRE_FLAGS = {"i": "i", "m": "m", "s": "s", "x": "x", "u": ""}

# Bracket delimiters are not recognised: "[abc]" is also a valid bare pattern
_DELIMITED = re.compile(r"^(?P<delim>[/#~!@%|,;])(?P<body>.*)(?P=delim)(?P<mods>[A-Za-z]*)$", re.S)


def translate_pcre(pattern: str) -> str:
    """Return the Python equivalent of a delimited PCRE pattern.

    Raises:
        ValueError: If the pattern uses a modifier Python cannot express.
    """
    match = _DELIMITED.match(pattern)
    if match is None or not match["body"]:
        return pattern

    mods = match["mods"]
    unsupported = sorted(set(mods) - set(_PCRE_FLAGS))
    if unsupported:
        raise ValueError(f"unsupported PCRE modifier(s): {''.join(unsupported)}")

    flags = "".join(sorted({_PCRE_FLAGS[m] for m in mods} - {""}))
    body = match["body"]
    translated = f"(?{flags}){body}" if flags else body
    logger.warning("exclude-regex %r has PCRE delimiters, using %r", pattern, translated)
    return translated


def compile_exclude_regex(pattern: str) -> re.Pattern[str]:
    """Compile a (possibly PCRE-delimited) exclude pattern.

    Raises:
        ValueError: For unsupported modifiers.
        re.error: If the pattern does not compile.
    """
    return re.compile(translate_pcre(pattern))
