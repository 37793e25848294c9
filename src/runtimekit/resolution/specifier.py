"""parsing of version specifiers into packaging specifier sets.

grammar:

    specifier := "" | exact | clause (("," | whitespace) clause)*
    clause    := [op] token
    op        := ">=" | "<=" | ">" | "<" | "==" | "=" | "!=" | "~=" | "^" | "~"
    token     := component ("." component)*
    component := digits | "x" | "X" | "*"

wildcard components may only trail the numeric ones (`2.x.x`, not `2.x.1`).
"""
import re
from typing import List, NamedTuple, Optional
from packaging.specifiers import InvalidSpecifier, SpecifierSet

from ..domain.errors import InvalidVersionSpecifier

_CLAUSE = re.compile(r"^(>=|<=|==|!=|~=|>|<|=|\^|~)?\s*(\S+)$")
_WILDCARDS = {"x", "X", "*"}
_EXACT = re.compile(r"^v?\d+(\.\d+)*([-+.]?[0-9A-Za-z][0-9A-Za-z.+-]*)?$")


class ParsedSpecifier(NamedTuple):
    """a parsed specifier: either an exact token or a specifier set."""
    raw: str
    exact: Optional[str]
    constraint: Optional[SpecifierSet]

    @property
    def is_empty(self) -> bool:
        return self.exact is None and self.constraint is None


def parse_specifier(raw: str) -> ParsedSpecifier:
    text = (raw or "").strip()
    if not text:
        return ParsedSpecifier(raw=raw, exact=None, constraint=None)

    if _EXACT.match(text) and not _has_wildcard(text):
        return ParsedSpecifier(raw=raw, exact=text, constraint=None)

    clauses = _split_clauses(text)
    translated: List[str] = []
    for clause in clauses:
        match = _CLAUSE.match(clause)
        if not match:
            raise InvalidVersionSpecifier(raw, f"cannot parse clause '{clause}'")
        op, token = match.groups()
        translated.extend(_translate(raw, op or "", token))

    try:
        constraint = SpecifierSet(",".join(translated))
    except InvalidSpecifier as e:
        raise InvalidVersionSpecifier(raw, str(e)) from e
    return ParsedSpecifier(raw=raw, exact=None, constraint=constraint)


def _has_wildcard(token: str) -> bool:
    return any(part in _WILDCARDS for part in token.split("."))


def _split_clauses(text: str) -> List[str]:
    # glue operators to their token so ">= 2.0" stays one clause
    text = re.sub(r"(>=|<=|==|!=|~=|>|<|=|\^|~)\s+", r"\1", text)
    return [c for c in re.split(r"[,\s]+", text) if c]


def _numeric_parts(raw: str, token: str) -> List[int]:
    """leading numeric components of a token, with trailing wildcards dropped."""
    parts = token.lstrip("v").split(".")
    numbers: List[int] = []
    seen_wildcard = False
    for part in parts:
        if part in _WILDCARDS:
            seen_wildcard = True
            continue
        if seen_wildcard:
            raise InvalidVersionSpecifier(raw, f"wildcards must be trailing in '{token}'")
        if not part.isdigit():
            raise InvalidVersionSpecifier(raw, f"'{part}' is not a numeric component in '{token}'")
        numbers.append(int(part))
    return numbers


def _join(numbers: List[int]) -> str:
    return ".".join(str(n) for n in numbers)


def _bump(numbers: List[int], index: int) -> str:
    """increment the component at index and drop everything after it."""
    bumped = numbers[: index + 1]
    bumped[index] += 1
    return _join(bumped)


def _translate(raw: str, op: str, token: str) -> List[str]:
    if not _has_wildcard(token):
        if op in ("^", "~"):
            return _translate_range(raw, op, _numeric_parts(raw, token))
        if op in ("", "="):
            op = "=="
        return [f"{op}{token.lstrip('v')}"]

    numbers = _numeric_parts(raw, token)
    if not numbers:
        # bare wildcard matches everything
        if op in ("", "=", "==", ">=", "<="):
            return []
        raise InvalidVersionSpecifier(raw, f"operator '{op}' cannot apply to '{token}'")

    last = len(numbers) - 1
    if op in ("", "=", "=="):
        return [f"=={_join(numbers)}.*"]
    if op == "!=":
        return [f"!={_join(numbers)}.*"]
    if op == ">=":
        return [f">={_join(numbers)}"]
    if op == ">":
        return [f">={_bump(numbers, last)}"]
    if op == "<":
        return [f"<{_join(numbers)}"]
    if op == "<=":
        return [f"<{_bump(numbers, last)}"]
    if op in ("^", "~"):
        return _translate_range(raw, op, numbers)
    raise InvalidVersionSpecifier(raw, f"operator '{op}' cannot apply to '{token}'")


def _translate_range(raw: str, op: str, numbers: List[int]) -> List[str]:
    if not numbers:
        raise InvalidVersionSpecifier(raw, f"'{op}' needs at least one numeric component")
    lower = f">={_join(numbers)}"
    if op == "~":
        # ~1 allows minor changes, ~1.2 and ~1.2.3 only patch changes
        index = 0 if len(numbers) == 1 else 1
        return [lower, f"<{_bump(numbers, index)}"]
    # ^ allows changes that keep the left-most non-zero component
    index = next((i for i, n in enumerate(numbers) if n != 0), len(numbers) - 1)
    return [lower, f"<{_bump(numbers, index)}"]
