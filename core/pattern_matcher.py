"""
Wildcard matching of module paths against import patterns.

A pattern without ``*`` matches a module path only when both strings are
equal. Each ``*`` stands for zero or more characters and the match always
covers the whole module path, so ``org.springframework.boot.*`` matches
``org.springframework.boot.autoconfigure.SpringBootApplication`` but not
``org.springframework.bootstrap.X``.
"""
import re
from functools import lru_cache
from typing import Optional, Pattern

from core.errors import InvalidImportPatternError

WILDCARD = "*"

# Characters that only separate path segments; a pattern made of these and
# wildcards alone has no literal anchor and would match any import.
SEPARATORS = frozenset("./:@-_")


@lru_cache(maxsize=4096)
def compile_pattern(pattern: str) -> Pattern:
    """Compile an import pattern into an anchored regular expression."""
    regex = ".*".join(re.escape(part) for part in pattern.split(WILDCARD))
    return re.compile(regex, re.DOTALL)


def matches(module_path: str, pattern: str) -> bool:
    """Return True if ``module_path`` is matched by ``pattern``."""
    if WILDCARD not in pattern:
        return module_path == pattern
    return compile_pattern(pattern).fullmatch(module_path) is not None


def validate_pattern(pattern: object, framework: Optional[str] = None) -> str:
    """
    Check that a pattern is usable and return it.

    Raises:
        InvalidImportPatternError: naming the pattern and its owning framework.
    """
    if not isinstance(pattern, str):
        raise InvalidImportPatternError(pattern, framework, "pattern must be a string")
    if not pattern:
        raise InvalidImportPatternError(pattern, framework, "pattern is empty")
    if any(ch.isspace() for ch in pattern):
        raise InvalidImportPatternError(pattern, framework, "pattern contains whitespace")
    if WILDCARD * 2 in pattern:
        raise InvalidImportPatternError(pattern, framework, "consecutive wildcards are not allowed")
    if all(ch == WILDCARD or ch in SEPARATORS for ch in pattern):
        raise InvalidImportPatternError(pattern, framework, "pattern has no literal package name")

    # Warm the cache so the first classification call does not pay for it
    compile_pattern(pattern)
    return pattern


def pattern_covers(broad: str, narrow: str) -> bool:
    """
    Return True if every module matched by ``narrow`` is also matched by ``broad``.

    Wildcards in ``narrow`` are treated as literal text when tested against
    ``broad``; since ``*`` in ``broad`` absorbs any run of characters this is
    exact for trailing wildcards, which is how rule files use them.
    """
    if broad == narrow:
        return True
    if WILDCARD not in broad:
        return False
    return compile_pattern(broad).fullmatch(narrow) is not None
