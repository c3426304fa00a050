"""Record splitting and tokenizing.

A "record" is one blank-line-delimited block of fields:
    <name>:<value> <name>:<value> ...

Fields may span several physical lines, e.g.:
    ecl:gry pid:860033327 eyr:2020 hcl:#fffffd
    byr:1937 iyr:2017 cid:147 hgt:183cm

Design notes:
- Splitting never fails; tokenizing and year parsing raise ParseError.
- Unknown field names are kept by the tokenizer but never projected.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Mapping, Union

from .errors import ParseError


DIGITS = "0123456789"
MAX_NUMBER_DIGITS = 18

YEAR_FIELDS = ("byr", "iyr", "eyr")
TEXT_FIELDS = ("hgt", "hcl", "ecl", "pid")


@dataclass(frozen=True)
class Credentials:
    """Typed projection of a tokenized record onto the seven known fields.

    Absent years default to 0 and absent strings to "", so a record that
    slipped past the presence check still fails its range checks.
    """
    byr: int = 0
    iyr: int = 0
    eyr: int = 0
    hgt: str = ""
    hcl: str = ""
    ecl: str = ""
    pid: str = ""


def split_records(source: Union[str, Iterable[str]]) -> list[str]:
    """Split text into raw record strings on blank lines.

    Non-empty lines of one record are joined with a single space. Runs of
    blank lines never yield empty records and a trailing blank line is not
    required.
    """
    lines = source.splitlines() if isinstance(source, str) else source

    out: list[str] = []
    buf: list[str] = []
    for line in lines:
        line = line.strip()
        if not line:
            if buf:
                out.append(" ".join(buf))
                buf = []
            continue
        buf.append(line)
    if buf:
        out.append(" ".join(buf))
    return out


def tokenize(raw: str) -> dict[str, str]:
    """Tokenize one raw record into a name -> value mapping.

    Tokens are split on the first colon; a repeated name keeps its last value.

    Raises:
        ParseError: if a token has no colon.
    """
    fields: dict[str, str] = {}
    for token in raw.split():
        name, sep, value = token.partition(":")
        if not sep:
            raise ParseError(f"expected <name>:<value>, got {token!r}")
        fields[name] = value
    return fields


def parse_year(name: str, value: str) -> int:
    """Parse a year field strictly: optional sign, then ASCII digits only."""
    body = value[1:] if value[:1] in ("+", "-") else value
    if not body or any(c not in DIGITS for c in body):
        raise ParseError(f"{name}: expected an integer, got {value!r}")
    if len(body.lstrip("0")) > MAX_NUMBER_DIGITS:
        raise ParseError(f"{name}: more than {MAX_NUMBER_DIGITS} digits in {value[:24]!r}...")
    number = int(body.lstrip("0") or "0")
    return -number if value[0] == "-" else number


def parse_credentials(source: Union[str, Mapping[str, str]]) -> Credentials:
    """Project a raw record (or its tokenized mapping) onto Credentials.

    Raises:
        ParseError: if tokenizing fails or a year is not an integer.
    """
    fields = tokenize(source) if isinstance(source, str) else source

    kwargs: dict[str, object] = {}
    for name in YEAR_FIELDS:
        if name in fields:
            kwargs[name] = parse_year(name, fields[name])
    for name in TEXT_FIELDS:
        if name in fields:
            kwargs[name] = fields[name]
    return Credentials(**kwargs)  # type: ignore[arg-type]
