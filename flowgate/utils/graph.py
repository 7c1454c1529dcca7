# flowgate/utils/graph.py
from typing import Any, Dict, List

import networkx as nx

from flowgate.model.graph import GraphIndex, WorkflowGraph


def build_connection_graph(workflow: WorkflowGraph, index: GraphIndex) -> nx.MultiDiGraph:
    """
    Build the connection multigraph keyed by node id.

    References are resolved through `index` (id first, then name); references
    that resolve to nothing are left out. Graph nodes follow the workflow's
    node order. A source key that resolves gets `listed_as_source=True` even
    when it has no targets; a target that resolves gets `listed_as_target=True`
    even when its source does not.
    """
    G = nx.MultiDiGraph()
    for node in index.by_id.values():
        G.add_node(node.id, name=node.name, type=node.type, listed_as_source=False, listed_as_target=False)

    for out in workflow.connections:
        src, _via = index.resolve(out.source)
        if src is None or src.id not in G:
            continue
        G.nodes[src.id]["listed_as_source"] = True

    for out, channel, gi, _ti, target in workflow.iter_targets():
        dst, _ = index.resolve(target.node)
        if dst is None or dst.id not in G:
            continue
        G.nodes[dst.id]["listed_as_target"] = True
        src, _ = index.resolve(out.source)
        if src is None or src.id not in G:
            continue
        G.add_edge(src.id, dst.id, channel=channel.type, output=gi, input=target.index)
    return G


def isolated_nodes(G: nx.MultiDiGraph) -> List[str]:
    """Node ids with no incoming or outgoing connection, in graph order."""
    return [
        n for n, attrs in G.nodes(data=True)
        if G.degree(n) == 0
        and not attrs.get("listed_as_source", False)
        and not attrs.get("listed_as_target", False)
    ]


def graph_summary(G: nx.MultiDiGraph) -> Dict[str, Any]:
    """Shape metrics shown alongside a report; never used for scoring."""
    n_nodes = G.number_of_nodes()
    if n_nodes == 0:
        return {"n_nodes": 0, "n_edges": 0, "components": 0, "acyclic": True, "isolated": []}

    acyclic = nx.is_directed_acyclic_graph(G)
    summary = {
        "n_nodes": n_nodes,
        "n_edges": G.number_of_edges(),
        "components": nx.number_weakly_connected_components(G),
        "acyclic": acyclic,
        "isolated": isolated_nodes(G),
    }
    if not acyclic:
        # loops are legal in n8n (e.g. splitInBatches); shown for information only
        summary["cycle"] = [u for u, _v, *_ in nx.find_cycle(G)]
    return summary
