# flowgate/model/graph.py
# Read-only in-memory view of an n8n-style workflow document.
# Parsing is tolerant: malformed parts are kept (with a shape flag) so the
# validation passes can report them instead of the parser raising.

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterator, Mapping, Optional, Tuple


class WorkflowInputError(TypeError):
    """Raised when the input cannot be treated as a workflow document at all."""


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType(value)
    return value


def is_missing(value: Any) -> bool:
    """A field counts as missing when absent, null or a blank string."""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ---------------------------------------------------------------------------
# Connections: OutputGroup -> Channel -> [ConnectionGroup] -> [ConnectionTarget]
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConnectionTarget:
    node: Any
    type: Any
    index: Any
    is_object: bool = True

    @classmethod
    def from_wire(cls, entry: Any) -> "ConnectionTarget":
        if not isinstance(entry, Mapping):
            return cls(node=None, type=None, index=None, is_object=False)
        return cls(node=entry.get("node"), type=entry.get("type"), index=entry.get("index"))


@dataclass(frozen=True)
class ConnectionGroup:
    """Targets fed by one output port of the source node."""
    targets: Tuple[ConnectionTarget, ...]
    is_sequence: bool = True

    @classmethod
    def from_wire(cls, group: Any) -> "ConnectionGroup":
        if not isinstance(group, (list, tuple)):
            return cls(targets=(), is_sequence=False)
        return cls(targets=tuple(ConnectionTarget.from_wire(t) for t in group))


@dataclass(frozen=True)
class Channel:
    """One connection type ("main", "error", ...) of a source node."""
    type: str
    groups: Tuple[ConnectionGroup, ...]
    is_sequence: bool = True

    @classmethod
    def from_wire(cls, ctype: str, groups: Any) -> "Channel":
        if not isinstance(groups, (list, tuple)):
            return cls(type=ctype, groups=(), is_sequence=False)
        return cls(type=ctype, groups=tuple(ConnectionGroup.from_wire(g) for g in groups))


@dataclass(frozen=True)
class OutputGroup:
    source: str
    channels: Tuple[Channel, ...]
    is_mapping: bool = True

    @classmethod
    def from_wire(cls, source: str, outputs: Any) -> "OutputGroup":
        if not isinstance(outputs, Mapping):
            return cls(source=source, channels=(), is_mapping=False)
        return cls(
            source=source,
            channels=tuple(Channel.from_wire(str(ctype), groups) for ctype, groups in outputs.items()),
        )


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Node:
    """
    A processing node as found on the wire.

    Values are kept as given (a malformed typeVersion stays a string, etc.);
    `present` lists the keys the wire object actually had.
    """
    order: int
    id: Any = None
    name: Any = None
    type: Any = None
    type_version: Any = None
    position: Any = None
    parameters: Any = None
    credentials: Any = None
    disabled: Any = None
    retry_on_fail: Any = None
    max_tries: Any = None
    wait_between_tries: Any = None
    on_error: Any = None
    present: FrozenSet[str] = frozenset()
    is_object: bool = True

    @classmethod
    def from_wire(cls, order: int, data: Any) -> "Node":
        if not isinstance(data, Mapping):
            return cls(order=order, is_object=False)
        return cls(
            order=order,
            id=data.get("id"),
            name=data.get("name"),
            type=data.get("type"),
            type_version=data.get("typeVersion"),
            position=data.get("position"),
            parameters=_freeze(data.get("parameters")),
            credentials=_freeze(data.get("credentials")),
            disabled=data.get("disabled"),
            retry_on_fail=data.get("retryOnFail"),
            max_tries=data.get("maxTries"),
            wait_between_tries=data.get("waitBetweenTries"),
            on_error=data.get("onError"),
            present=frozenset(data.keys()),
        )

    def wire_value(self, key: str) -> Any:
        """Look a node field up by its wire (camelCase) name."""
        return getattr(self, _NODE_WIRE_FIELDS.get(key, key), None)


_NODE_WIRE_FIELDS = {
    "typeVersion": "type_version",
    "retryOnFail": "retry_on_fail",
    "maxTries": "max_tries",
    "waitBetweenTries": "wait_between_tries",
    "onError": "on_error",
}


# ---------------------------------------------------------------------------
# Lookup index
# ---------------------------------------------------------------------------

ID = "id"
NAME = "name"


@dataclass(frozen=True)
class GraphIndex:
    """
    id -> node and name -> node lookups. The first occurrence wins when
    ids or names collide (collisions are reported by the schema pass).
    """
    by_id: Mapping[str, Node]
    by_name: Mapping[str, Node]

    @classmethod
    def build(cls, nodes: Tuple[Node, ...]) -> "GraphIndex":
        by_id: Dict[str, Node] = {}
        by_name: Dict[str, Node] = {}
        for n in nodes:
            if isinstance(n.id, str) and n.id not in by_id:
                by_id[n.id] = n
            if isinstance(n.name, str) and n.name not in by_name:
                by_name[n.name] = n
        return cls(by_id=MappingProxyType(by_id), by_name=MappingProxyType(by_name))

    @property
    def ids(self) -> FrozenSet[str]:
        return frozenset(self.by_id)

    @property
    def names(self) -> FrozenSet[str]:
        return frozenset(self.by_name)

    def resolve(self, ref: Any) -> Tuple[Optional[Node], Optional[str]]:
        """
        Resolve a connection reference. Ids take priority over names, so a
        string that is one node's id and another node's name maps to the
        node carrying the id. Returns (node, "id" | "name" | None).
        """
        if not isinstance(ref, str):
            return None, None
        if ref in self.by_id:
            return self.by_id[ref], ID
        if ref in self.by_name:
            return self.by_name[ref], NAME
        return None, None


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WorkflowGraph:
    id: Any
    name: Any
    active: Any
    nodes: Tuple[Node, ...]
    connections: Tuple[OutputGroup, ...]
    settings: Any
    meta: Any
    tags: Any
    description: Any
    present: FrozenSet[str]
    nodes_is_sequence: bool = True
    connections_is_mapping: bool = True
    raw_nodes: Any = None
    raw_connections: Any = None
    index: GraphIndex = field(default=None, compare=False, repr=False)  # type: ignore[assignment]

    @classmethod
    def from_dict(cls, data: Any) -> "WorkflowGraph":
        if data is None:
            raise WorkflowInputError("workflow must not be None")
        if not isinstance(data, Mapping):
            raise WorkflowInputError(f"workflow must be an object, got {type(data).__name__}")

        raw_nodes = data.get("nodes")
        nodes_is_sequence = isinstance(raw_nodes, (list, tuple))
        nodes = tuple(Node.from_wire(i, n) for i, n in enumerate(raw_nodes)) if nodes_is_sequence else ()

        raw_conns = data.get("connections")
        conns_is_mapping = isinstance(raw_conns, Mapping)
        connections = (
            tuple(OutputGroup.from_wire(str(src), outs) for src, outs in raw_conns.items())
            if conns_is_mapping else ()
        )

        return cls(
            id=data.get("id"),
            name=data.get("name"),
            active=data.get("active"),
            nodes=nodes,
            connections=connections,
            settings=_freeze(data.get("settings")),
            meta=_freeze(data.get("meta")),
            tags=data.get("tags"),
            description=data.get("description"),
            present=frozenset(data.keys()),
            nodes_is_sequence=nodes_is_sequence,
            connections_is_mapping=conns_is_mapping,
            raw_nodes=raw_nodes,
            raw_connections=raw_conns,
            index=GraphIndex.build(nodes),
        )

    def top_level(self, key: str) -> Any:
        if key == "nodes":
            return self.raw_nodes
        if key == "connections":
            return self.raw_connections
        return getattr(self, key, None)

    def node_by_id(self, node_id: str) -> Optional[Node]:
        return self.index.by_id.get(node_id)

    def node_by_name(self, name: str) -> Optional[Node]:
        return self.index.by_name.get(name)

    def iter_targets(self) -> Iterator[Tuple[OutputGroup, Channel, int, int, ConnectionTarget]]:
        """Walk every well-shaped connection target: (source, channel, group_idx, target_idx, target)."""
        for out in self.connections:
            for channel in out.channels:
                for gi, group in enumerate(channel.groups):
                    for ti, target in enumerate(group.targets):
                        if target.is_object:
                            yield out, channel, gi, ti, target
