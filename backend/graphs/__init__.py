"""Graphs - relationship (node/link) and flow graph builders."""

from .flow import build_flow_data, flow_total, validate_flow_data
from .network import build_graph_data, build_link_graph, node_groups, validate_graph_data

__all__ = [
    "build_flow_data",
    "build_graph_data",
    "build_link_graph",
    "flow_total",
    "node_groups",
    "validate_flow_data",
    "validate_graph_data",
]
