"""
Flow graphs (Sankey). Edge identity is the (source, target) pair: duplicate
pairs merge by summing weight, so the total flow is conserved.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

import networkx as nx
from loguru import logger

from shared.errors import InvalidGraph
from shaping.aggregate import group_key, to_number

UNKNOWN_NODE = "Unknown"


def _add_flow(G: nx.DiGraph, source: str, target: str, weight: float) -> None:
    for name in (source, target):
        if name not in G:
            G.add_node(name, index=G.number_of_nodes())
    if G.has_edge(source, target):
        G[source][target]["weight"] += weight
    else:
        G.add_edge(source, target, weight=weight, order=G.number_of_edges())


def _flow_payload(G: nx.DiGraph, max_nodes: Optional[int] = None) -> Dict[str, List[Dict[str, Any]]]:
    names = list(G.nodes)
    if max_nodes is not None and len(names) > max_nodes:
        logger.info("Flow node ceiling reached: kept {} of {} nodes", max_nodes, len(names))
        names = names[:max_nodes]
    kept = set(names)
    nodes = [{"id": name, "name": name, "index": i} for i, name in enumerate(names)]
    edges = sorted(G.edges(data=True), key=lambda e: e[2]["order"])
    links = [
        {"source": s, "target": t, "weight": attrs["weight"]}
        for s, t, attrs in edges
        if s in kept and t in kept
    ]
    return {"nodes": nodes, "links": links}


def build_flow_data(
    data: Sequence[Mapping],
    source_field: str,
    target_field: str,
    value_field: Optional[str] = None,
    max_nodes: Optional[int] = None,
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Flat rows to a flow graph. Missing endpoints become the "Unknown" node;
    a missing or non-numeric value counts as 1.
    """
    G = nx.DiGraph()
    for record in data or []:
        source = group_key(record.get(source_field)) if record.get(source_field) is not None else UNKNOWN_NODE
        target = group_key(record.get(target_field)) if record.get(target_field) is not None else UNKNOWN_NODE
        weight = (to_number(record.get(value_field)) or 1) if value_field else 1
        _add_flow(G, source, target, weight)
    return _flow_payload(G, max_nodes)


def validate_flow_data(data: Any, max_nodes: Optional[int] = None) -> Dict[str, List[Dict[str, Any]]]:
    """
    Normalize a pre-built {nodes, links} flow object. Link endpoints may be a
    node index, a node name, or a node object with a name. Unresolvable links
    are dropped.
    """
    if not isinstance(data, Mapping):
        raise InvalidGraph("Flow data must be an object")
    if not isinstance(data.get("nodes"), list):
        raise InvalidGraph("Flow data must have a nodes array")
    if not isinstance(data.get("links"), list):
        raise InvalidGraph("Flow data must have a links array")

    names: List[str] = []
    for index, node in enumerate(data["nodes"]):
        name = node.get("name") if isinstance(node, Mapping) else node
        names.append(group_key(name) if name not in (None, "") else f"Node {index}")
    by_name = {name: name for name in names}

    def resolve(ref: Any) -> Optional[str]:
        if isinstance(ref, bool):
            return None
        if isinstance(ref, int):
            return names[ref] if 0 <= ref < len(names) else None
        if isinstance(ref, Mapping):
            ref = ref.get("name")
        return by_name.get(ref) if isinstance(ref, str) else None

    G = nx.DiGraph()
    for name in names:
        if name not in G:
            G.add_node(name, index=G.number_of_nodes())
    dropped = 0
    for link in data["links"]:
        if not isinstance(link, Mapping):
            dropped += 1
            continue
        source, target = resolve(link.get("source")), resolve(link.get("target"))
        if source is None or target is None:
            dropped += 1
            continue
        _add_flow(G, source, target, to_number(link.get("value", link.get("weight"))) or 1)
    if dropped:
        logger.warning("Dropped {} flow links with invalid references", dropped)
    return _flow_payload(G, max_nodes)


def flow_total(links: Sequence[Mapping]) -> float:
    """Total flow carried by all links."""
    return sum(link.get("weight") or 0 for link in links)
