"""Validation pipeline.

Pipeline shape:
- split text -> raw records
- presence check on each raw record (structural)
- tokenize -> Credentials -> compiled field rules (semantic)
- one Verdict per record, in input order

A malformed record yields a "malformed" verdict; it never aborts the batch.
"""

from __future__ import annotations
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Iterable, Optional, Sequence, Union

from .config import ValidationConfig
from .errors import ParseError
from .records import parse_credentials, split_records, tokenize
from .rules import Check, Rule, check_fields, compile_rules, required_fields


logger = logging.getLogger(__name__)

VALID = "valid"
INVALID = "invalid"
MALFORMED = "malformed"


@dataclass(frozen=True)
class Verdict:
    """Outcome of validating one record.

    `field` is the short name of the first field that failed, if any.
    """
    status: str
    field: Optional[str] = None
    detail: str = ""

    @property
    def valid(self) -> bool:
        return self.status == VALID


@dataclass(frozen=True)
class BatchResult:
    verdicts: list[Verdict]
    elapsed: float

    @property
    def total(self) -> int:
        return len(self.verdicts)

    @property
    def valid(self) -> int:
        return count_valid(self.verdicts)

    @property
    def invalid(self) -> int:
        return sum(1 for v in self.verdicts if v.status == INVALID)

    @property
    def malformed(self) -> int:
        return sum(1 for v in self.verdicts if v.status == MALFORMED)


def missing_field(raw: str, required: Sequence[str], keys: Optional[Iterable[str]] = None) -> Optional[str]:
    """Return the first required field that is absent, or None.

    Without `keys` presence is plain substring containment in the raw text.
    """
    present = raw if keys is None else set(keys)
    for name in required:
        if name not in present:
            return name
    return None


def _validate(
    raw: str,
    config: ValidationConfig,
    required: Sequence[str],
    compiled: Sequence[tuple[Rule, Check]],
) -> Verdict:
    try:
        fields = tokenize(raw) if config.presence == "token" else None
        missing = missing_field(raw, required, fields)
        if missing is not None:
            return Verdict(INVALID, missing, "missing field")
        if config.mode == "presence":
            return Verdict(VALID)

        if fields is None:
            fields = tokenize(raw)
        creds = parse_credentials(fields)
    except ParseError as ex:
        logger.warning("malformed record %r: %s", raw, ex)
        return Verdict(MALFORMED, None, str(ex))

    # Optional rules only apply to fields the record actually carries.
    active = [(r, c) for r, c in compiled if r.required or r.field in fields]
    failed = check_fields(creds, active)
    if failed is not None:
        value = getattr(creds, failed.field)
        return Verdict(INVALID, failed.field, f"{failed.name} rejected {value!r}")
    return Verdict(VALID)


def validate_record(raw: str, config: Optional[ValidationConfig] = None) -> Verdict:
    """Validate one raw record string."""
    config = config or ValidationConfig()
    return _validate(raw, config, required_fields(config.rules), compile_rules(config.rules))


def validate_batch(
    source: Union[str, Iterable[str]],
    config: Optional[ValidationConfig] = None,
) -> list[Verdict]:
    """Validate every record of a text blob (or iterable of lines), in order.

    Raises:
        RuleError: if a configured rule cannot be compiled.
    """
    config = config or ValidationConfig()
    records = split_records(source)
    one = partial(
        _validate,
        config=config,
        required=required_fields(config.rules),
        compiled=compile_rules(config.rules),
    )

    if config.workers > 1 and len(records) > 1:
        with ThreadPoolExecutor(max_workers=config.workers) as pool:
            verdicts = list(pool.map(one, records))
    else:
        verdicts = [one(r) for r in records]

    for i, v in enumerate(verdicts):
        logger.debug("record %d: %s %s %s", i, v.status, v.field or "", v.detail)
    return verdicts


def count_valid(verdicts: Iterable[Verdict]) -> int:
    return sum(1 for v in verdicts if v.valid)


def run_batch(
    source: Union[str, Iterable[str]],
    config: Optional[ValidationConfig] = None,
) -> BatchResult:
    """Validate a batch and collect the aggregate counts and elapsed time."""
    start = time.perf_counter()
    verdicts = validate_batch(source, config)
    result = BatchResult(verdicts=verdicts, elapsed=time.perf_counter() - start)
    logger.info(
        "validated %d records: %d valid, %d invalid, %d malformed in %.6fs",
        result.total, result.valid, result.invalid, result.malformed, result.elapsed,
    )
    return result
