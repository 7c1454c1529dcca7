# flowgate/structural/checker.py

from typing import Any, List, Mapping, Set

from flowgate.model.findings import Finding, STRUCTURE, NODE, error, warning
from flowgate.model.graph import Node, WorkflowGraph, is_missing, is_number
from flowgate.structural import schema as rules


def check_schema(workflow: WorkflowGraph) -> List[Finding]:
    """
    Structural pass: required fields, primitive types, patterns and bounds
    for the workflow and each of its nodes. Never looks inside `parameters`.

    Returns findings in a stable order: workflow-level first, then nodes in
    the order they appear.
    """
    findings: List[Finding] = []
    _check_workflow_fields(workflow, findings)

    seen_ids: Set[str] = set()
    seen_names: Set[str] = set()
    for node in workflow.nodes:
        _check_node(node, seen_ids, seen_names, findings)
    return findings


def _check_workflow_fields(workflow: WorkflowGraph, findings: List[Finding]) -> None:
    for f in rules.REQUIRED_WORKFLOW_FIELDS:
        if is_missing(workflow.top_level(f)):
            findings.append(error(
                STRUCTURE, "REQUIRED_FIELD_MISSING",
                f"Required field '{f}' is missing", field=f,
            ))

    name = workflow.name
    if not is_missing(name):
        if not isinstance(name, str):
            findings.append(error(STRUCTURE, "INVALID_NAME_TYPE", "Workflow name must be a string", field="name"))
        elif len(name) > rules.WORKFLOW_NAME_MAX_LENGTH:
            findings.append(warning(
                STRUCTURE, "NAME_TOO_LONG",
                f"Workflow name exceeds maximum length of {rules.WORKFLOW_NAME_MAX_LENGTH} characters",
                field="name",
            ))

    wid = workflow.id
    if not is_missing(wid):
        if not isinstance(wid, str):
            findings.append(error(STRUCTURE, "INVALID_ID_PATTERN", "Workflow ID must be a string", field="id"))
        elif not rules.WORKFLOW_ID_PATTERN.match(wid):
            findings.append(error(STRUCTURE, "INVALID_ID_PATTERN", "Workflow ID contains invalid characters", field="id"))

    if workflow.active is not None and not isinstance(workflow.active, bool):
        findings.append(error(STRUCTURE, "INVALID_ACTIVE_FLAG", "Workflow active status must be a boolean", field="active"))

    if not is_missing(workflow.raw_nodes):
        if not workflow.nodes_is_sequence:
            findings.append(error(STRUCTURE, "INVALID_NODES_TYPE", "Nodes must be an array", field="nodes"))
        elif len(workflow.nodes) == 0:
            findings.append(error(STRUCTURE, "NO_NODES", "Workflow must have at least one node", field="nodes"))

    if not is_missing(workflow.raw_connections) and not workflow.connections_is_mapping:
        findings.append(error(
            STRUCTURE, "INVALID_CONNECTIONS_TYPE", "Connections must be an object", field="connections",
        ))


def _check_node(node: Node, seen_ids: Set[str], seen_names: Set[str], findings: List[Finding]) -> None:
    prefix = f"nodes[{node.order}]"

    if not node.is_object:
        findings.append(error(NODE, "INVALID_NODE", f"Node at index {node.order} must be an object", field=prefix))
        return

    nid = node.id
    for f in rules.REQUIRED_NODE_FIELDS:
        if is_missing(node.wire_value(f)):
            findings.append(error(
                NODE, "REQUIRED_NODE_FIELD_MISSING",
                f"Required node field '{f}' is missing", node_id=nid, field=f"{prefix}.{f}",
            ))

    # id: uniqueness, then pattern
    if isinstance(nid, str) and not is_missing(nid):
        if nid in seen_ids:
            findings.append(error(NODE, "DUPLICATE_NODE_ID", f"Duplicate node ID: {nid}", node_id=nid, field=f"{prefix}.id"))
        else:
            seen_ids.add(nid)
        if not rules.NODE_ID_PATTERN.match(nid):
            findings.append(error(
                NODE, "INVALID_NODE_ID_PATTERN",
                f"Node ID '{nid}' contains invalid characters", node_id=nid, field=f"{prefix}.id",
            ))
    elif not is_missing(nid):
        findings.append(error(NODE, "INVALID_NODE_ID_PATTERN", "Node ID must be a string", node_id=nid, field=f"{prefix}.id"))

    name = node.name
    if isinstance(name, str) and not is_missing(name):
        if name in seen_names:
            findings.append(error(
                NODE, "DUPLICATE_NODE_NAME", f"Duplicate node name: {name}", node_id=nid, field=f"{prefix}.name",
            ))
        else:
            seen_names.add(name)
        if len(name) > rules.NODE_NAME_MAX_LENGTH:
            findings.append(warning(
                NODE, "NODE_NAME_TOO_LONG",
                f"Node name exceeds maximum length of {rules.NODE_NAME_MAX_LENGTH} characters",
                node_id=nid, field=f"{prefix}.name",
            ))
    elif not is_missing(name):
        findings.append(error(NODE, "INVALID_NODE_NAME", "Node name must be a string", node_id=nid, field=f"{prefix}.name"))

    ntype = node.type
    if not is_missing(ntype):
        if not isinstance(ntype, str) or not rules.NODE_TYPE_PATTERN.match(ntype):
            findings.append(error(
                NODE, "INVALID_NODE_TYPE_FORMAT", f"Invalid node type format: {ntype}",
                node_id=nid, field=f"{prefix}.type",
            ))

    version = node.type_version
    if not is_missing(version) and (not is_number(version) or not version >= 1):
        findings.append(error(
            NODE, "INVALID_TYPE_VERSION", "Node typeVersion must be a number >= 1",
            node_id=nid, field=f"{prefix}.typeVersion",
        ))

    if not is_missing(node.position):
        _check_position(node, prefix, findings)

    params = node.parameters
    if params is not None and not isinstance(params, Mapping):
        findings.append(error(
            NODE, "INVALID_PARAMETERS_TYPE", "Node parameters must be an object",
            node_id=nid, field=f"{prefix}.parameters",
        ))

    tries = node.max_tries
    if tries is not None and (not is_number(tries) or not rules.MAX_TRIES_MIN <= tries <= rules.MAX_TRIES_MAX):
        findings.append(warning(
            NODE, "INVALID_MAX_TRIES",
            f"maxTries should be between {rules.MAX_TRIES_MIN} and {rules.MAX_TRIES_MAX}",
            node_id=nid, field=f"{prefix}.maxTries",
        ))

    on_error = node.on_error
    if on_error is not None and on_error not in rules.ERROR_HANDLING_OPTIONS:
        findings.append(error(
            NODE, "INVALID_ERROR_HANDLING", f"Invalid error handling option: {on_error}",
            node_id=nid, field=f"{prefix}.onError",
        ))


def _check_position(node: Node, prefix: str, findings: List[Finding]) -> None:
    pos: Any = node.position
    if not isinstance(pos, (list, tuple)) or len(pos) != 2 or not all(is_number(c) for c in pos):
        findings.append(error(
            NODE, "INVALID_POSITION", "Node position must be an array of two numbers [x, y]",
            node_id=node.id, field=f"{prefix}.position",
        ))
        return

    x, y = pos
    if not (rules.POSITION_MIN_X <= x <= rules.POSITION_MAX_X and rules.POSITION_MIN_Y <= y <= rules.POSITION_MAX_Y):
        findings.append(warning(
            NODE, "POSITION_OUT_OF_BOUNDS", "Node position is outside recommended bounds",
            node_id=node.id, field=f"{prefix}.position",
        ))
