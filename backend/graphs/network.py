"""
Node/link graphs for relationship views (force-directed layouts).

Nodes are deduplicated by id, first sighting wins. Links are positional: every
relationship row is its own link, since a pair may legitimately repeat. Any link
whose endpoint is not in the final (possibly truncated) node set is dropped.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

import networkx as nx
from loguru import logger

from shared.config import MAX_NODES
from shared.errors import InvalidGraph
from shaping.aggregate import group_key, to_number


def endpoint_id(value: Any) -> Optional[str]:
    """Link endpoint as a node id. Accepts a bare id or a node object with an id."""
    if isinstance(value, Mapping):
        value = value.get("id")
    if value is None:
        return None
    return group_key(value)


def _first(*values: Any) -> Any:
    for v in values:
        if v not in (None, "", 0, False):
            return v
    return None


def build_link_graph(nodes: Sequence[Dict[str, Any]], links: Sequence[Dict[str, Any]]) -> nx.MultiDiGraph:
    """
    Graph of nodes (first id wins) and links whose endpoints both exist.
    Each link keeps its input position as the edge key.
    """
    G = nx.MultiDiGraph()
    for node in nodes:
        if node["id"] not in G:
            G.add_node(node["id"])
            G.nodes[node["id"]].update(node)
    dropped = 0
    for idx, link in enumerate(links):
        if link["source"] in G and link["target"] in G:
            G.add_edge(link["source"], link["target"], key=idx)
            G.edges[link["source"], link["target"], idx].update(link)
        else:
            dropped += 1
    if dropped:
        logger.debug("Dropped {} links with unknown endpoints", dropped)
    return G


def graph_to_payload(G: nx.MultiDiGraph) -> Dict[str, List[Dict[str, Any]]]:
    """Export as {nodes, links} in node insertion order and original link order."""
    nodes = [dict(attrs) for _, attrs in G.nodes(data=True)]
    edges = sorted(G.edges(keys=True, data=True), key=lambda e: e[2])
    links = [dict(attrs) for _, _, _, attrs in edges]
    return {"nodes": nodes, "links": links}


def node_groups(nodes: Sequence[Mapping]) -> List[str]:
    """Distinct node types in first-seen order, for categorical coloring."""
    seen: Dict[str, None] = {}
    for node in nodes:
        node_type = node.get("type")
        if node_type:
            seen.setdefault(str(node_type), None)
    return list(seen)


def validate_graph_data(
    data: Any,
    node_id_field: str = "Id",
    node_label_field: str = "Name",
    node_size_field: Optional[str] = None,
    node_type_field: Optional[str] = None,
    link_weight_field: Optional[str] = None,
    max_nodes: int = MAX_NODES,
) -> Dict[str, List[Dict[str, Any]]]:
    """Normalize a pre-built {nodes, links} object. Links are optional."""
    if not isinstance(data, Mapping):
        raise InvalidGraph("Graph data must be an object")
    raw_nodes = data.get("nodes")
    if not isinstance(raw_nodes, list):
        raise InvalidGraph("Graph data must have a nodes array")
    raw_links = data.get("links") if isinstance(data.get("links"), list) else []

    nodes = []
    for index, node in enumerate(raw_nodes[:max_nodes]):
        if not isinstance(node, Mapping):
            raise InvalidGraph(f"Graph node at index {index} must be an object")
        node_id = _first(node.get("id"), node.get(node_id_field))
        nodes.append({
            **node,
            "id": group_key(node_id) if node_id is not None else f"node-{index}",
            "label": _first(node.get("label"), node.get(node_label_field), node.get("name")) or f"Node {index}",
            "size": _first(node.get("size"), node.get(node_size_field) if node_size_field else None),
            "type": _first(node.get("type"), node.get(node_type_field) if node_type_field else None),
            "recordId": _first(node.get("recordId"), node.get("Id"), node.get("id")),
        })

    links = []
    for link in raw_links:
        if not isinstance(link, Mapping):
            continue
        source, target = endpoint_id(link.get("source")), endpoint_id(link.get("target"))
        if source is None or target is None:
            continue
        weight = _first(
            to_number(link.get("weight")),
            to_number(link.get(link_weight_field)) if link_weight_field else None,
        )
        links.append({**link, "source": source, "target": target, "weight": weight or 1})

    return graph_to_payload(build_link_graph(nodes, links))


def build_graph_data(
    data: Sequence[Mapping],
    source_field: str,
    target_field: str,
    node_id_field: str = "Id",
    node_label_field: str = "Name",
    node_size_field: Optional[str] = None,
    node_type_field: Optional[str] = None,
    link_weight_field: Optional[str] = None,
    max_nodes: int = MAX_NODES,
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Flat relationship rows to {nodes, links}.
    Node attributes come from the row where the id is first seen; target-only
    nodes get bare defaults. Rows with an empty source or target are skipped.
    """
    nodes: Dict[str, Dict[str, Any]] = {}
    links: List[Dict[str, Any]] = []

    for record in data or []:
        source_id = endpoint_id(record.get(source_field)) or ""
        target_id = endpoint_id(record.get(target_field)) or ""
        if not source_id or not target_id:
            continue

        if source_id not in nodes:
            nodes[source_id] = {
                "id": source_id,
                "label": record.get(node_label_field) or source_id,
                "size": (to_number(record.get(node_size_field)) or 1) if node_size_field else 1,
                "type": record.get(node_type_field) if node_type_field else None,
                "recordId": record.get(node_id_field) or record.get("Id"),
            }
        if target_id not in nodes:
            nodes[target_id] = {"id": target_id, "label": target_id, "size": 1, "type": None, "recordId": None}

        links.append({
            "source": source_id,
            "target": target_id,
            "weight": (to_number(record.get(link_weight_field)) or 1) if link_weight_field else 1,
        })

    kept = list(nodes.values())[:max_nodes]
    if len(nodes) > max_nodes:
        logger.info("Node ceiling reached: kept {} of {} nodes", max_nodes, len(nodes))
    return graph_to_payload(build_link_graph(kept, links))
