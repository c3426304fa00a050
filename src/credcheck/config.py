"""Validation settings.

`mode`:
- "full": presence check, then every field rule
- "presence": required field names only

`presence` decides how a required field counts as present:
- "substring": its short name occurs anywhere in the record text, so a
  value such as "cid:pid" satisfies "pid"
- "token": it is a key of the tokenized record
"""

from __future__ import annotations
from dataclasses import dataclass

from .errors import ConfigError
from .rules import DEFAULT_RULES, Rule


MODES = ("full", "presence")
PRESENCE_POLICIES = ("substring", "token")


@dataclass(frozen=True)
class ValidationConfig:
    mode: str = "full"
    presence: str = "substring"
    rules: tuple[Rule, ...] = DEFAULT_RULES
    workers: int = 1

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ConfigError(f"unknown mode: {self.mode!r}")
        if self.presence not in PRESENCE_POLICIES:
            raise ConfigError(f"unknown presence policy: {self.presence!r}")
        if self.workers < 1:
            raise ConfigError(f"workers must be >= 1, got {self.workers}")
        # Stored as a tuple; callers may pass any iterable of rules.
        object.__setattr__(self, "rules", tuple(self.rules))
