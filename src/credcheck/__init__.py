"""Batch validator for blank-line-delimited credential records."""

from .config import ValidationConfig
from .errors import ConfigError, CredCheckError, ParseError, RuleError
from .records import Credentials, parse_credentials, split_records, tokenize
from .rules import DEFAULT_RULES, REQUIRED_FIELDS, Rule
from .validate import BatchResult, Verdict, count_valid, run_batch, validate_batch, validate_record

__all__ = [
    "BatchResult",
    "ConfigError",
    "CredCheckError",
    "Credentials",
    "DEFAULT_RULES",
    "ParseError",
    "REQUIRED_FIELDS",
    "Rule",
    "RuleError",
    "ValidationConfig",
    "Verdict",
    "count_valid",
    "parse_credentials",
    "run_batch",
    "split_records",
    "tokenize",
    "validate_batch",
    "validate_record",
]
