import copy

import pytest


def _node(node_id, name=None, type="n8n-nodes-base.set", parameters=None, position=(0, 0), **extra):
    node = {
        "id": node_id,
        "name": name if name is not None else node_id.title(),
        "type": type,
        "typeVersion": 1,
        "position": list(position),
        "parameters": {} if parameters is None else parameters,
    }
    node.update(extra)
    return node


def _link(*targets, ctype="main"):
    """Outputs of one source: a single group fanning out to `targets`."""
    return {ctype: [[{"node": t, "type": "main", "index": 0} for t in targets]]}


def _workflow(nodes, connections=None, **extra):
    wf = {
        "id": "wf-test",
        "name": "Test workflow",
        "active": False,
        "nodes": nodes,
        "connections": {} if connections is None else connections,
    }
    wf.update(extra)
    return copy.deepcopy(wf)


@pytest.fixture
def make_node():
    return _node


@pytest.fixture
def link():
    return _link


@pytest.fixture
def make_workflow():
    return _workflow


@pytest.fixture
def chain_workflow():
    """trigger -> a -> b, all referenced by id; clean apart from suggestions."""
    nodes = [
        _node("trigger", "Manual Trigger", type="n8n-nodes-base.manualTrigger"),
        _node("a", "Step A"),
        _node("b", "Step B"),
    ]
    conns = {"trigger": _link("a"), "a": _link("b")}
    return _workflow(nodes, conns)
