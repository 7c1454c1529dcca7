# flowgate/model/findings.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

ERROR = "error"
WARNING = "warning"
SEVERITIES = (ERROR, WARNING)

STRUCTURE = "structure"
NODE = "node"
CONNECTION = "connection"
PARAMETER = "parameter"
COMPATIBILITY = "compatibility"
BEST_PRACTICE = "best-practice"
CATEGORIES = (STRUCTURE, NODE, CONNECTION, PARAMETER, COMPATIBILITY, BEST_PRACTICE)

# categories that may never block an import
ADVISORY_CATEGORIES = (COMPATIBILITY, BEST_PRACTICE)


@dataclass(frozen=True)
class Finding:
    """One reported issue. Compatibility and best-practice findings are always warnings."""
    severity: str
    category: str
    code: str
    message: str
    node_id: Optional[str] = None
    field: Optional[str] = None

    def __post_init__(self) -> None:
        if self.severity not in SEVERITIES:
            raise ValueError(f"Unknown severity: {self.severity}")
        if self.category not in CATEGORIES:
            raise ValueError(f"Unknown category: {self.category}")
        if self.severity == ERROR and self.category in ADVISORY_CATEGORIES:
            raise ValueError(f"'{self.category}' findings cannot be errors ({self.code})")

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "severity": self.severity,
            "category": self.category,
            "code": self.code,
            "message": self.message,
        }
        if self.node_id is not None:
            out["nodeId"] = self.node_id
        if self.field is not None:
            out["field"] = self.field
        return out

    def __str__(self) -> str:
        where = f" (node={self.node_id})" if self.node_id is not None else ""
        return f"[{self.category.upper()}] {self.code}: {self.message}{where}"


def error(category: str, code: str, message: str, node_id: Any = None, field: Optional[str] = None) -> Finding:
    return Finding(ERROR, category, code, message, _node_ref(node_id), field)


def warning(category: str, code: str, message: str, node_id: Any = None, field: Optional[str] = None) -> Finding:
    return Finding(WARNING, category, code, message, _node_ref(node_id), field)


def _node_ref(node_id: Any) -> Optional[str]:
    # ids on the wire may be numbers; findings always carry text
    if node_id is None:
        return None
    return node_id if isinstance(node_id, str) else str(node_id)


@dataclass(frozen=True)
class ValidationReport:
    """
    Outcome of one validate_workflow() call.

    errors/warnings keep the order in which the passes produced them:
    schema, node types, connections, settings.
    """
    errors: Tuple[Finding, ...]
    warnings: Tuple[Finding, ...]
    suggestions: Tuple[str, ...]
    compatibility_score: int

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def findings(self) -> Tuple[Finding, ...]:
        return self.errors + self.warnings

    def codes(self) -> List[str]:
        """All finding codes, errors first."""
        return [f.code for f in self.findings]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": [f.to_dict() for f in self.errors],
            "warnings": [f.to_dict() for f in self.warnings],
            "suggestions": list(self.suggestions),
            "compatibilityScore": self.compatibility_score,
        }
