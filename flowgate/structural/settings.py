# flowgate/structural/settings.py

from typing import Any, List

from jsonschema import Draft7Validator, ValidationError

from flowgate.model.findings import Finding, COMPATIBILITY, STRUCTURE, error, warning
from flowgate.model.graph import WorkflowGraph
from flowgate.structural.schema import BLOCKING_SETTINGS, SETTINGS_SCHEMA

_SETTINGS_VALIDATOR = Draft7Validator(SETTINGS_SCHEMA)


def check_settings(workflow: WorkflowGraph) -> List[Finding]:
    """
    Validate workflow settings against SETTINGS_SCHEMA.

    Absent settings are fine. Violations on executionOrder/executionTimeout
    are structure errors; the other keys only produce compatibility warnings.
    """
    settings = workflow.settings
    if settings is None:
        return []

    # MappingProxyType is not a dict for jsonschema's "object" check
    instance: Any = dict(settings) if hasattr(settings, "keys") else settings
    errors = sorted(_SETTINGS_VALIDATOR.iter_errors(instance), key=_sort_key)

    findings: List[Finding] = []
    for e in errors:
        if not e.path:
            findings.append(error(STRUCTURE, "INVALID_SETTINGS_TYPE", "Workflow settings must be an object", field="settings"))
            continue
        key = str(e.path[0])
        field = f"settings.{key}"
        if key in BLOCKING_SETTINGS:
            findings.append(error(STRUCTURE, BLOCKING_SETTINGS[key], _describe(key, e), field=field))
        else:
            findings.append(warning(COMPATIBILITY, "INVALID_SETTING", _describe(key, e), field=field))
    return findings


def _sort_key(e: ValidationError):
    return ([str(p) for p in e.path], e.validator)


def _describe(key: str, e: ValidationError) -> str:
    if e.validator == "enum":
        allowed = ", ".join(str(v) for v in e.validator_value)
        return f"Invalid value for setting '{key}': {e.instance!r} (expected one of: {allowed})"
    if e.validator == "minimum":
        return f"Setting '{key}' must be >= {e.validator_value}, got {e.instance!r}"
    if e.validator == "type":
        return f"Setting '{key}' must be of type {e.validator_value}, got {e.instance!r}"
    return f"Invalid setting '{key}': {e.message}"
