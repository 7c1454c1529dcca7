# flowgate/structural/schema.py
import re

REQUIRED_WORKFLOW_FIELDS = ("id", "name", "nodes", "connections")
REQUIRED_NODE_FIELDS = ("id", "name", "type", "typeVersion", "position", "parameters")

WORKFLOW_NAME_MAX_LENGTH = 255
NODE_NAME_MAX_LENGTH = 100

WORKFLOW_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
NODE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
# package and node name, e.g. "n8n-nodes-base.httpRequest"
NODE_TYPE_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+$")
NODE_TYPE_SEPARATOR = "."

POSITION_MIN_X, POSITION_MAX_X = -10000, 10000
POSITION_MIN_Y, POSITION_MAX_Y = -10000, 10000

MAX_TRIES_MIN, MAX_TRIES_MAX = 1, 10

ERROR_HANDLING_OPTIONS = ("stopWorkflow", "continueRegularOutput", "continueErrorOutput")

CONNECTION_TYPES = ("main", "error")
# LangChain-style sub-node channels (ai_languageModel, ai_tool, ...)
AI_CONNECTION_PREFIX = "ai_"
MAX_CONNECTIONS_PER_OUTPUT = 100

# Above this many nodes a workflow is expected to declare an execution timeout.
TIMEOUT_SUGGESTION_NODE_COUNT = 10

SCORE_MAX = 100
WARNING_PENALTY = 5

# Workflow settings as exported by n8n. Only the keys listed here are checked;
# unknown keys pass through untouched.
SETTINGS_SCHEMA = {
    "type": "object",
    "properties": {
        "executionOrder": {"enum": ["v0", "v1"]},
        "executionTimeout": {"type": "number", "minimum": 0},
        "saveManualExecutions": {"type": "boolean"},
        "saveExecutionProgress": {"type": "boolean"},
        "saveDataErrorExecution": {"enum": ["all", "none"]},
        "saveDataSuccessExecution": {"enum": ["all", "none"]},
        "callerPolicy": {"enum": ["workflowsFromSameOwner", "workflowsFromAList", "any"]},
        "callerIds": {"type": "string"},
        "errorWorkflow": {"type": "string"},
        "timezone": {"type": "string"},
    },
    "additionalProperties": True,
}

# settings keys whose violations block import; everything else is advisory
BLOCKING_SETTINGS = {
    "executionOrder": "INVALID_EXECUTION_ORDER",
    "executionTimeout": "INVALID_EXECUTION_TIMEOUT",
}
