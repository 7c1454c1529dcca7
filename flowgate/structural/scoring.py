# flowgate/structural/scoring.py

from typing import List, Mapping, Sequence

from flowgate.model.findings import Finding
from flowgate.model.graph import WorkflowGraph, is_missing
from flowgate.structural.nodes import ENTRY_NODE_TYPES
from flowgate.structural.schema import SCORE_MAX, TIMEOUT_SUGGESTION_NODE_COUNT, WARNING_PENALTY

SUGGEST_ERROR_HANDLING = "Consider adding error handling to nodes that might fail"
SUGGEST_DESCRIPTION = "Consider adding a workflow description for better documentation"
SUGGEST_TAGS = "Consider adding tags to organize your workflows"
SUGGEST_TIMEOUT = "Consider setting an execution timeout for complex workflows"


def compatibility_score(errors: Sequence[Finding], warnings: Sequence[Finding]) -> int:
    """0 when anything blocks import, else 100 minus 5 per warning (floored at 0)."""
    if len(errors) > 0:
        return 0
    return max(0, SCORE_MAX - WARNING_PENALTY * len(warnings))


def generate_suggestions(workflow: WorkflowGraph) -> List[str]:
    """Advisory nudges. They never influence validity or the score."""
    suggestions: List[str] = []

    nodes = [n for n in workflow.nodes if n.is_object]
    if any(n.on_error is None and n.type not in ENTRY_NODE_TYPES for n in nodes):
        suggestions.append(SUGGEST_ERROR_HANDLING)

    if is_missing(_description(workflow)):
        suggestions.append(SUGGEST_DESCRIPTION)

    if not workflow.tags:
        suggestions.append(SUGGEST_TAGS)

    settings = workflow.settings if isinstance(workflow.settings, Mapping) else {}
    if len(workflow.nodes) >= TIMEOUT_SUGGESTION_NODE_COUNT and not settings.get("executionTimeout"):
        suggestions.append(SUGGEST_TIMEOUT)

    return suggestions


def _description(workflow: WorkflowGraph):
    meta = workflow.meta
    if isinstance(meta, Mapping) and not is_missing(meta.get("description")):
        return meta.get("description")
    return workflow.description
