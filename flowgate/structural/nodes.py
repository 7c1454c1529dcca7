# flowgate/structural/nodes.py
# Per-type parameter contracts. NODE_RULES is a closed table: supporting a
# new node type means adding one entry, existing rules stay untouched.

from typing import Callable, Dict, List, Mapping, Optional

from flowgate.model.findings import Finding, BEST_PRACTICE, COMPATIBILITY, PARAMETER, error, warning
from flowgate.model.graph import Node, is_missing
from flowgate.structural.schema import NODE_TYPE_SEPARATOR

START = "n8n-nodes-base.start"
MANUAL_TRIGGER = "n8n-nodes-base.manualTrigger"
HTTP_REQUEST = "n8n-nodes-base.httpRequest"
CODE = "n8n-nodes-base.code"
FUNCTION = "n8n-nodes-base.function"
FUNCTION_ITEM = "n8n-nodes-base.functionItem"

ENTRY_NODE_TYPES = (START, MANUAL_TRIGGER)

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")
CODE_MODES = ("runOnceForAllItems", "runOnceForEachItem")
CODE_BODY_BY_LANGUAGE = {
    "javaScript": "jsCode",
    "python": "pythonCode",
    "pythonNative": "pythonCode",
}
DEFAULT_CODE_BODY = "jsCode"

NodeRule = Callable[[Node, Mapping], List[Finding]]


def _missing_param(node: Node, param: str, message: str) -> Finding:
    return error(PARAMETER, "MISSING_REQUIRED_PARAMETER", message, node_id=node.id, field=param)


def _invalid_param(node: Node, param: str, message: str) -> Finding:
    return error(PARAMETER, "INVALID_PARAMETER_VALUE", message, node_id=node.id, field=param)


def check_entry_node(node: Node, params: Mapping) -> List[Finding]:
    """Start/manual trigger nodes conventionally carry no configuration."""
    if len(params) > 0:
        return [warning(
            BEST_PRACTICE, "ENTRY_NODE_HAS_PARAMETERS",
            "Start node typically should not have parameters", node_id=node.id, field="parameters",
        )]
    return []


def check_http_request_node(node: Node, params: Mapping) -> List[Finding]:
    out: List[Finding] = []
    if is_missing(params.get("url")):
        out.append(_missing_param(node, "url", "HTTP Request node must have a URL parameter"))
    method = params.get("method")
    if method is not None and method not in HTTP_METHODS:
        out.append(_invalid_param(node, "method", f"Invalid HTTP method: {method}"))
    return out


def check_code_node(node: Node, params: Mapping) -> List[Finding]:
    out: List[Finding] = []
    language = params.get("language")
    body = CODE_BODY_BY_LANGUAGE.get(language, DEFAULT_CODE_BODY) if isinstance(language, str) else DEFAULT_CODE_BODY
    if is_missing(params.get(body)):
        out.append(_missing_param(node, body, f"Code node must have code in '{body}'"))
    mode = params.get("mode")
    if mode is not None and mode not in CODE_MODES:
        out.append(_invalid_param(node, "mode", f"Invalid code execution mode: {mode}"))
    return out


def check_function_node(node: Node, params: Mapping) -> List[Finding]:
    if is_missing(params.get("functionCode")):
        return [_missing_param(node, "functionCode", "Function node must have code in 'functionCode'")]
    return []


NODE_RULES: Dict[str, NodeRule] = {
    START: check_entry_node,
    MANUAL_TRIGGER: check_entry_node,
    HTTP_REQUEST: check_http_request_node,
    CODE: check_code_node,
    FUNCTION: check_function_node,
    FUNCTION_ITEM: check_function_node,
}


def check_unknown_type(node: Node, params: Mapping) -> List[Finding]:
    """Default branch: no parameter contract, only the naming convention."""
    if NODE_TYPE_SEPARATOR not in node.type:
        return [warning(
            COMPATIBILITY, "NODE_TYPE_NAMING",
            'Node type should follow the format "package.nodeName"', node_id=node.id, field="type",
        )]
    return []


def check_node_types(nodes, rules: Optional[Dict[str, NodeRule]] = None) -> List[Finding]:
    """
    Run the type-specific rule for every node, in node order.

    Nodes without a string `type` or without an object `parameters` are
    skipped; the schema pass reports those.
    """
    table = NODE_RULES if rules is None else rules
    findings: List[Finding] = []
    for node in nodes:
        if not node.is_object or not isinstance(node.type, str) or is_missing(node.type):
            continue
        if not isinstance(node.parameters, Mapping):
            continue
        rule = table.get(node.type, check_unknown_type)
        findings.extend(rule(node, node.parameters))
    return findings
