import dataclasses

import pytest

from flowgate.model.findings import Finding, ValidationReport, error, warning
from flowgate.model.graph import GraphIndex, Node, WorkflowGraph, WorkflowInputError


@pytest.mark.parametrize("bad", [None, [], "workflow", 42])
def test_from_dict_rejects_non_objects(bad):
    with pytest.raises(WorkflowInputError):
        WorkflowGraph.from_dict(bad)


def test_workflow_input_error_is_type_error():
    assert issubclass(WorkflowInputError, TypeError)


def test_nodes_keep_insertion_order(make_workflow, make_node):
    wf = make_workflow([make_node("c"), make_node("a"), make_node("b")])
    graph = WorkflowGraph.from_dict(wf)
    assert [n.id for n in graph.nodes] == ["c", "a", "b"]
    assert [n.order for n in graph.nodes] == [0, 1, 2]


def test_graph_is_read_only(make_workflow, make_node):
    graph = WorkflowGraph.from_dict(make_workflow([make_node("a", parameters={"x": 1})]))
    with pytest.raises(dataclasses.FrozenInstanceError):
        graph.name = "other"
    with pytest.raises(TypeError):
        graph.nodes[0].parameters["x"] = 2


def test_node_reads_wire_fields(make_node):
    node = Node.from_wire(3, make_node("a", maxTries=3, retryOnFail=True, onError="continueErrorOutput"))
    assert node.order == 3
    assert node.max_tries == 3
    assert node.retry_on_fail is True
    assert node.wire_value("onError") == "continueErrorOutput"
    assert node.wire_value("typeVersion") == 1
    assert "maxTries" in node.present


def test_non_object_node_is_flagged():
    node = Node.from_wire(0, "not a node")
    assert not node.is_object
    assert node.id is None


def test_index_lookup_by_id_and_name(make_workflow, make_node):
    graph = WorkflowGraph.from_dict(make_workflow([make_node("a", "Alpha"), make_node("b", "Beta")]))
    assert graph.node_by_id("a").name == "Alpha"
    assert graph.node_by_name("Beta").id == "b"
    assert graph.node_by_id("Alpha") is None
    assert graph.index.ids == {"a", "b"}
    assert graph.index.names == {"Alpha", "Beta"}


def test_index_prefers_id_over_name(make_node):
    # "shared" is node 1's id and node 2's name
    nodes = tuple(Node.from_wire(i, n) for i, n in enumerate([
        make_node("shared", "First"),
        make_node("other", "shared"),
    ]))
    index = GraphIndex.build(nodes)
    node, via = index.resolve("shared")
    assert node.id == "shared"
    assert via == "id"

    node, via = index.resolve("First")
    assert node.id == "shared"
    assert via == "name"

    assert index.resolve("missing") == (None, None)
    assert index.resolve(7) == (None, None)


def test_index_keeps_first_duplicate(make_node):
    nodes = tuple(Node.from_wire(i, n) for i, n in enumerate([
        make_node("dup", "One"),
        make_node("dup", "Two"),
    ]))
    index = GraphIndex.build(nodes)
    assert index.by_id["dup"].name == "One"


def test_connection_shapes_are_preserved(make_workflow, make_node):
    wf = make_workflow(
        [make_node("a"), make_node("b"), make_node("c")],
        {
            "a": {"main": [[{"node": "b", "type": "main", "index": 0}], [{"node": "c", "type": "main", "index": 0}]]},
            "b": {"main": {"node": "c"}},
            "c": "nope",
        },
    )
    graph = WorkflowGraph.from_dict(wf)
    a, b, c = graph.connections

    assert a.source == "a"
    assert len(a.channels[0].groups) == 2  # two output ports
    assert a.channels[0].groups[1].targets[0].node == "c"
    assert not b.channels[0].is_sequence
    assert not c.is_mapping

    walked = [(out.source, gi, t.node) for out, _ch, gi, _ti, t in graph.iter_targets()]
    assert walked == [("a", 0, "b"), ("a", 1, "c")]


def test_malformed_top_level_containers():
    graph = WorkflowGraph.from_dict({"id": "x", "name": "x", "nodes": {"a": 1}, "connections": []})
    assert not graph.nodes_is_sequence
    assert graph.nodes == ()
    assert not graph.connections_is_mapping
    assert graph.connections == ()


def test_finding_rejects_blocking_advisory_categories():
    with pytest.raises(ValueError):
        Finding("error", "best-practice", "X", "nope")
    with pytest.raises(ValueError):
        error("compatibility", "X", "nope")
    assert warning("compatibility", "X", "fine").severity == "warning"


def test_finding_serializes_camel_case():
    f = error("node", "DUPLICATE_NODE_ID", "Duplicate node ID: a", node_id="a", field="nodes[1].id")
    assert f.to_dict() == {
        "severity": "error",
        "category": "node",
        "code": "DUPLICATE_NODE_ID",
        "message": "Duplicate node ID: a",
        "nodeId": "a",
        "field": "nodes[1].id",
    }
    assert "nodeId" not in warning("structure", "X", "m").to_dict()


def test_numeric_node_id_is_carried_as_text():
    assert error("node", "X", "m", node_id=12).node_id == "12"


def test_report_to_dict_shape():
    report = ValidationReport(
        errors=(),
        warnings=(warning("best-practice", "ISOLATED_NODE", "m", node_id="a"),),
        suggestions=("s",),
        compatibility_score=95,
    )
    out = report.to_dict()
    assert out["isValid"] is True
    assert out["compatibilityScore"] == 95
    assert out["suggestions"] == ["s"]
    assert out["warnings"][0]["code"] == "ISOLATED_NODE"
