"""Charts - one data pipeline per chart kind."""

from .pipelines import (
    build_flow_chart,
    build_force_graph,
    build_gauge_chart,
    build_histogram_chart,
    build_scatter_chart,
    build_series_chart,
    build_treemap_chart,
    prepare_or_raise,
    required_value_fields,
    resolve_records,
    truncation_warning,
)

__all__ = [
    "build_flow_chart",
    "build_force_graph",
    "build_gauge_chart",
    "build_histogram_chart",
    "build_scatter_chart",
    "build_series_chart",
    "build_treemap_chart",
    "prepare_or_raise",
    "required_value_fields",
    "resolve_records",
    "truncation_warning",
]
