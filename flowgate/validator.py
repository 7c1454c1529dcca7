# flowgate/validator.py

from typing import Any, List, Optional, Union

from flowgate.model.findings import Finding, ValidationReport
from flowgate.model.graph import WorkflowGraph
from flowgate.options import DEFAULT_OPTIONS, ValidatorOptions
from flowgate.structural.checker import check_schema
from flowgate.structural.connections import check_connections
from flowgate.structural.nodes import check_node_types
from flowgate.structural.scoring import compatibility_score, generate_suggestions
from flowgate.structural.settings import check_settings
from flowgate.utils.logger import get_logger

logger = get_logger("validator")


def validate_workflow(
    workflow: Union[WorkflowGraph, Any],
    options: Optional[ValidatorOptions] = None,
) -> ValidationReport:
    """
    Validate a workflow document and score its compatibility.

    `workflow` is either a parsed WorkflowGraph or the raw JSON object
    ({id, name, nodes, connections, active, settings, meta}). The passes run
    in a fixed order (schema, node types, connections, settings) and their
    findings keep that order in the report.

    Raises WorkflowInputError only when `workflow` is None or not an object;
    every other problem is reported as a finding.
    """
    opts = options or DEFAULT_OPTIONS
    graph = workflow if isinstance(workflow, WorkflowGraph) else WorkflowGraph.from_dict(workflow)
    index = graph.index

    findings: List[Finding] = []
    findings.extend(check_schema(graph))
    findings.extend(check_node_types(graph.nodes))
    findings.extend(check_connections(graph, index, opts))
    findings.extend(check_settings(graph))

    errors = tuple(f for f in findings if f.is_error)
    warnings = tuple(f for f in findings if not f.is_error)
    score = compatibility_score(errors, warnings)
    suggestions = tuple(generate_suggestions(graph))

    logger.debug(
        "validated workflow %r: %d errors, %d warnings, score=%d",
        graph.id, len(errors), len(warnings), score,
    )
    return ValidationReport(
        errors=errors,
        warnings=warnings,
        suggestions=suggestions,
        compatibility_score=score,
    )
