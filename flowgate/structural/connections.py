# flowgate/structural/connections.py

from typing import List

from flowgate.model.findings import Finding, BEST_PRACTICE, COMPATIBILITY, CONNECTION, error, warning
from flowgate.model.graph import NAME, Channel, ConnectionTarget, GraphIndex, Node, WorkflowGraph, is_missing, is_number
from flowgate.options import DEFAULT_OPTIONS, ValidatorOptions
from flowgate.structural import schema as rules
from flowgate.utils.graph import build_connection_graph, isolated_nodes


def check_connections(
    workflow: WorkflowGraph,
    index: GraphIndex,
    options: ValidatorOptions = DEFAULT_OPTIONS,
) -> List[Finding]:
    """
    Referential integrity and shape of the connection map, followed by one
    best-practice warning per isolated node.

    Findings follow the connection map's iteration order; isolated-node
    warnings come last, in node order.
    """
    findings: List[Finding] = []

    for out in workflow.connections:
        prefix = f"connections.{out.source}"
        src, via = index.resolve(out.source)
        if src is None:
            findings.append(error(
                CONNECTION, "INVALID_SOURCE_NODE",
                f"Connection references non-existent source node: {out.source}",
                node_id=out.source, field=prefix,
            ))
            continue
        if via == NAME:
            findings.append(_name_reference(
                options, "CONNECTION_USES_NAME",
                f"Connection source '{out.source}' uses node name instead of ID. "
                "Consider using node IDs for better reliability.",
                src, prefix,
            ))

        if not out.is_mapping:
            findings.append(error(
                CONNECTION, "INVALID_OUTPUT_GROUP",
                f"Outputs of '{out.source}' must be an object keyed by connection type",
                node_id=src.id, field=prefix,
            ))
            continue

        for channel in out.channels:
            findings.extend(_check_channel(channel, index, options, f"{prefix}.{channel.type}", src))

    G = build_connection_graph(workflow, index)
    for nid in isolated_nodes(G):
        node = index.by_id[nid]
        findings.append(warning(
            BEST_PRACTICE, "ISOLATED_NODE", "Node is not connected to any other nodes",
            node_id=nid, field=f"nodes[{node.order}]",
        ))
    return findings


def _check_channel(channel: Channel, index: GraphIndex, options: ValidatorOptions, prefix: str, src: Node) -> List[Finding]:
    findings: List[Finding] = []

    if channel.type not in rules.CONNECTION_TYPES and not channel.type.startswith(rules.AI_CONNECTION_PREFIX):
        findings.append(warning(
            COMPATIBILITY, "UNUSUAL_CONNECTION_TYPE", f"Unusual connection type: {channel.type}",
            node_id=src.id, field=prefix,
        ))

    if not channel.is_sequence:
        findings.append(error(
            CONNECTION, "INVALID_CONNECTION_LIST", "Connection list must be an array of connection groups",
            node_id=src.id, field=prefix,
        ))
        return findings

    for gi, group in enumerate(channel.groups):
        gprefix = f"{prefix}[{gi}]"
        if not group.is_sequence:
            findings.append(error(
                CONNECTION, "INVALID_CONNECTION_GROUP", "Connection group must be an array",
                node_id=src.id, field=gprefix,
            ))
            continue
        for ti, target in enumerate(group.targets):
            findings.extend(_check_target(target, index, options, f"{gprefix}[{ti}]", src))

    if len(channel.groups) > rules.MAX_CONNECTIONS_PER_OUTPUT:
        findings.append(warning(
            BEST_PRACTICE, "TOO_MANY_CONNECTIONS",
            f"High number of connection groups ({len(channel.groups)}) may impact performance",
            node_id=src.id, field=prefix,
        ))
    return findings


def _check_target(target: ConnectionTarget, index: GraphIndex, options: ValidatorOptions, prefix: str, src: Node) -> List[Finding]:
    if not target.is_object:
        return [error(
            CONNECTION, "INVALID_CONNECTION_TARGET", "Connection target must be an object",
            node_id=src.id, field=prefix,
        )]

    findings: List[Finding] = []
    dst, via = index.resolve(target.node)
    if dst is None:
        findings.append(error(
            CONNECTION, "INVALID_TARGET_NODE",
            f"Connection references non-existent target node: {target.node}",
            node_id=target.node, field=f"{prefix}.node",
        ))
    elif via == NAME:
        findings.append(_name_reference(
            options, "TARGET_USES_NAME",
            f"Connection target '{target.node}' uses node name instead of ID. "
            "Consider using node IDs for better reliability.",
            dst, f"{prefix}.node",
        ))

    if not is_number(target.index) or not target.index >= 0:
        findings.append(error(
            CONNECTION, "INVALID_CONNECTION_INDEX", "Connection index must be a non-negative number",
            node_id=src.id, field=f"{prefix}.index",
        ))

    if is_missing(target.type) or not isinstance(target.type, str):
        findings.append(error(
            CONNECTION, "INVALID_CONNECTION_TYPE", "Connection must have a valid type",
            node_id=src.id, field=f"{prefix}.type",
        ))
    return findings


def _name_reference(options: ValidatorOptions, code: str, message: str, node: Node, field: str) -> Finding:
    if options.allow_name_references:
        return warning(CONNECTION, code, message, node_id=node.id, field=field)
    return error(CONNECTION, code, message, node_id=node.id, field=field)
