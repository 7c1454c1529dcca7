# flowgate/options.py
from __future__ import annotations

import os
from dataclasses import dataclass

_TRUE = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ValidatorOptions:
    """
    Knobs for validate_workflow().

    allow_name_references: connections may point at a node by its name
        (reported as a warning). When False such references are errors.
    """
    allow_name_references: bool = True

    @classmethod
    def from_env(cls) -> "ValidatorOptions":
        """Read FLOWGATE_STRICT_REFERENCES from the environment."""
        strict = os.getenv("FLOWGATE_STRICT_REFERENCES", "").strip().lower() in _TRUE
        return cls(allow_name_references=not strict)


DEFAULT_OPTIONS = ValidatorOptions()
