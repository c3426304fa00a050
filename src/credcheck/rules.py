"""Field grammar and rule definitions.

A rule checks one field of a Credentials record.

We keep rules data-driven:
- a small, closed set of operations
- args are plain strings parsed at compile time
- no regex, no eval
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from .errors import RuleError
from .records import DIGITS, MAX_NUMBER_DIGITS, TEXT_FIELDS, YEAR_FIELDS, Credentials


Check = Callable[[Credentials], bool]

HEX_DIGITS = "0123456789abcdef"

FIELD_NAMES = {
    "byr": "birth-year",
    "iyr": "issue-year",
    "eyr": "expiration-year",
    "hgt": "height",
    "hcl": "hair-color",
    "ecl": "eye-color",
    "pid": "passport-id",
    "cid": "country-id",
}

EYE_COLORS = ("amb", "blu", "brn", "gry", "grn", "hzl", "oth")


@dataclass(frozen=True)
class Rule:
    """A single field rule.

    `field` is the short field name the rule reads from Credentials.
    """
    name: str
    field: str
    op: str
    arg: str
    required: bool = True


DEFAULT_RULES: tuple[Rule, ...] = (
    Rule(name="birth_year", field="byr", op="int_range", arg="1920-2002"),
    Rule(name="issue_year", field="iyr", op="int_range", arg="2010-2020"),
    Rule(name="expiration_year", field="eyr", op="int_range", arg="2020-2030"),
    Rule(name="height", field="hgt", op="height", arg="cm=150-193,in=59-76"),
    Rule(name="hair_color", field="hcl", op="hex_color", arg="6"),
    Rule(name="eye_color", field="ecl", op="one_of", arg=",".join(EYE_COLORS)),
    Rule(name="passport_id", field="pid", op="digits", arg="9"),
)


def required_fields(rules: Iterable[Rule]) -> list[str]:
    """Short names of the required fields, in rule order."""
    out: list[str] = []
    for r in rules:
        if r.required and r.field not in out:
            out.append(r.field)
    return out


REQUIRED_FIELDS = tuple(required_fields(DEFAULT_RULES))


def _parse_range(rule: Rule, text: str) -> tuple[int, int]:
    lo, sep, hi = text.strip().partition("-")
    try:
        bounds = int(lo), int(hi)
    except ValueError:
        bounds = None
    if not sep or bounds is None or bounds[0] > bounds[1]:
        raise RuleError(f"{rule.name}: bad range {text!r}, expected 'lo-hi'")
    return bounds


def _parse_count(rule: Rule) -> int:
    arg = rule.arg.lstrip("0")
    if not arg or len(arg) > MAX_NUMBER_DIGITS or any(c not in DIGITS for c in arg):
        raise RuleError(f"{rule.name}: expected a positive length, got {rule.arg!r}")
    return int(arg)


def leading_number(value: str) -> int:
    """Longest leading run of ASCII digits as an int, 0 if there is none.

    Runs with more than MAX_NUMBER_DIGITS significant digits saturate at
    10 ** MAX_NUMBER_DIGITS, which is above any configured range.
    """
    end = 0
    while end < len(value) and value[end] in DIGITS:
        end += 1
    digits = value[:end].lstrip("0")
    if len(digits) > MAX_NUMBER_DIGITS:
        return 10 ** MAX_NUMBER_DIGITS
    return int(digits) if digits else 0


def find_unit(value: str, units: Sequence[str]) -> str:
    """Leftmost occurrence of any unit anywhere in value, "" if none."""
    best = ""
    best_at = len(value) + 1
    for unit in units:
        at = value.find(unit)
        if at != -1 and at < best_at:
            best, best_at = unit, at
    return best


def compile_rule(rule: Rule) -> Check:
    """Compile a Rule into a callable check.

    Supported ops:
    - "int_range": arg is "lo-hi", inclusive; year fields only
    - "height": arg is "unit=lo-hi,unit=lo-hi"
    - "hex_color": arg is the number of hex digits after "#"
    - "one_of": arg is a comma-separated list of allowed values
    - "digits": arg is the exact number of decimal digits
    """
    op = rule.op.strip()
    field = rule.field

    if field not in YEAR_FIELDS and field not in TEXT_FIELDS:
        raise RuleError(f"{rule.name}: unknown field {field!r}")

    if op == "int_range":
        if field not in YEAR_FIELDS:
            raise RuleError(f"{rule.name}: int_range needs a year field, got {field!r}")
        lo, hi = _parse_range(rule, rule.arg)

        def check(c: Credentials) -> bool:
            return lo <= getattr(c, field) <= hi
        return check

    if field not in TEXT_FIELDS:
        raise RuleError(f"{rule.name}: {op!r} needs a text field, got {field!r}")

    if op == "height":
        limits: dict[str, tuple[int, int]] = {}
        for part in rule.arg.split(","):
            unit, sep, span = part.partition("=")
            if not sep or not unit.strip():
                raise RuleError(f"{rule.name}: bad unit range {part!r}, expected 'unit=lo-hi'")
            limits[unit.strip()] = _parse_range(rule, span)
        units = tuple(limits)

        def check(c: Credentials) -> bool:
            value = getattr(c, field)
            unit = find_unit(value, units)
            if not unit:
                return False
            lo, hi = limits[unit]
            return lo <= leading_number(value) <= hi
        return check

    if op == "hex_color":
        n = _parse_count(rule)

        def check(c: Credentials) -> bool:
            value = getattr(c, field)
            return (
                len(value) == n + 1
                and value[0] == "#"
                and all(ch in HEX_DIGITS for ch in value[1:])
            )
        return check

    if op == "one_of":
        allowed = frozenset(v.strip() for v in rule.arg.split(",") if v.strip())
        if not allowed:
            raise RuleError(f"{rule.name}: one_of needs at least one value")

        def check(c: Credentials) -> bool:
            return getattr(c, field) in allowed
        return check

    if op == "digits":
        n = _parse_count(rule)

        def check(c: Credentials) -> bool:
            value = getattr(c, field)
            return len(value) == n and all(ch in DIGITS for ch in value)
        return check

    raise RuleError(f"unknown op: {rule.op!r}")


def compile_rules(rules: Iterable[Rule]) -> list[tuple[Rule, Check]]:
    """Compile many rules, keeping each paired with its source rule."""
    return [(r, compile_rule(r)) for r in rules]


def check_fields(creds: Credentials, compiled: Iterable[tuple[Rule, Check]]) -> Optional[Rule]:
    """Return the first rule that fails, or None when every check passes."""
    for rule, check in compiled:
        if not check(creds):
            return rule
    return None
