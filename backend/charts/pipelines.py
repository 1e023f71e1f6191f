"""
Chart data pipelines.

Every chart follows the same sequence: resolve the data source, check required
fields and truncate, shape, reject empty output. Payloads are deep-copied
before they leave, so the rendering layer may mutate them freely.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from shared.config import MAX_NODES, MAX_RECORDS
from shared.errors import DataSourceError, EmptyResult, InvalidInput, MissingFields
from shared.utils import detach, format_value, truncate_label
from graphs import (
    build_flow_data,
    build_graph_data,
    flow_total,
    node_groups,
    validate_flow_data,
    validate_graph_data,
)
from hierarchy import build_hierarchy, calculate_total_value, normalize_hierarchy
from shaping import (
    Operation,
    aggregate_data,
    describe,
    extract_numeric,
    pearson,
    prepare_data,
    series_total,
    to_finite,
)


def resolve_records(
    records: Optional[Sequence[Mapping]],
    query_error: Optional[str] = None,
    prebuilt_hint: str = "",
) -> List[Mapping]:
    """
    Pick the record source: a non-empty collection, else the upstream query's
    rejection, else a "no data source" error.
    """
    if records:
        return list(records)
    if query_error is not None:
        raise DataSourceError(f"Query Error: {query_error or 'Query failed'}")
    options = "records" + (f", {prebuilt_hint}" if prebuilt_hint else "") + ", or a query"
    raise DataSourceError(f"No data source provided. Supply {options}.")


def truncation_warning(prepared: Mapping, limit: int) -> Optional[str]:
    if not prepared.get("truncated"):
        return None
    return f"Displaying first {limit:,} of {prepared['originalCount']:,} records"


def prepare_or_raise(
    records: Sequence[Mapping],
    required_fields: List[str],
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """prepare_data, raising the matching typed error instead of returning an invalid result."""
    prepared = prepare_data(records, required_fields=required_fields, limit=limit)
    if not prepared["valid"]:
        if prepared["errorType"] == "MissingFields":
            raise MissingFields(prepared["error"], prepared.get("missingFields"))
        raise InvalidInput(prepared["error"])
    return prepared


def required_value_fields(group_field: Optional[str], value_field: Optional[str], operation: Operation) -> List[str]:
    """Fields an aggregating chart needs; Count alone may omit valueField."""
    if not group_field:
        raise InvalidInput("groupField is required")
    fields = [group_field]
    if operation is not Operation.COUNT:
        if not value_field:
            raise InvalidInput(f"valueField is required for {operation.value}")
        fields.append(value_field)
    return fields


def build_series_chart(
    records: Optional[Sequence[Mapping]] = None,
    group_field: Optional[str] = None,
    value_field: Optional[str] = None,
    operation: Any = Operation.SUM,
    query_error: Optional[str] = None,
    limit: Optional[int] = None,
    value_format: str = "number",
    currency: str = "USD",
) -> Dict[str, Any]:
    """Bar and donut charts: {series, totalValue, formattedTotal, truncatedWarning}."""
    op = Operation.parse(operation)
    rows = resolve_records(records, query_error)
    limit = MAX_RECORDS if limit is None else limit
    prepared = prepare_or_raise(rows, required_value_fields(group_field, value_field, op), limit)

    series = aggregate_data(prepared["data"], group_field, value_field, op)
    if not series:
        raise EmptyResult("No data after aggregation")
    total = series_total(series)
    return detach({
        "series": series,
        "totalValue": total,
        "formattedTotal": format_value(total, value_format, currency),
        "truncatedWarning": truncation_warning(prepared, limit),
    })


def build_treemap_chart(
    records: Optional[Sequence[Mapping]] = None,
    hierarchy_data: Optional[Mapping] = None,
    group_field: Optional[str] = None,
    secondary_group_field: Optional[str] = None,
    value_field: Optional[str] = None,
    operation: Any = Operation.SUM,
    query_error: Optional[str] = None,
    limit: Optional[int] = None,
    value_format: str = "number",
    currency: str = "USD",
) -> Dict[str, Any]:
    """Treemap: {root, totalValue, formattedTotal, truncatedWarning}. A pre-built hierarchy wins over records."""
    warning = None
    if hierarchy_data is not None:
        root = normalize_hierarchy(hierarchy_data)
    else:
        op = Operation.parse(operation)
        rows = resolve_records(records, query_error, "hierarchyData")
        limit = MAX_RECORDS if limit is None else limit
        prepared = prepare_or_raise(rows, required_value_fields(group_field, value_field, op), limit)

        root = build_hierarchy(prepared["data"], group_field, value_field, op, secondary_group_field)
        if not root.get("children"):
            raise EmptyResult("No data after building hierarchy")
        warning = truncation_warning(prepared, limit)

    total = calculate_total_value(root)
    return detach({
        "root": root,
        "totalValue": total,
        "formattedTotal": format_value(total, value_format, currency),
        "truncatedWarning": warning,
    })


def build_force_graph(
    records: Optional[Sequence[Mapping]] = None,
    graph_data: Optional[Mapping] = None,
    source_field: Optional[str] = None,
    target_field: Optional[str] = None,
    node_id_field: str = "Id",
    node_label_field: str = "Name",
    node_size_field: Optional[str] = None,
    node_type_field: Optional[str] = None,
    link_weight_field: Optional[str] = None,
    max_nodes: int = MAX_NODES,
    query_error: Optional[str] = None,
) -> Dict[str, Any]:
    """Force-directed graph: {nodes, links, nodeGroups, truncatedWarning}."""
    field_options = dict(
        node_id_field=node_id_field,
        node_label_field=node_label_field,
        node_size_field=node_size_field,
        node_type_field=node_type_field,
        link_weight_field=link_weight_field,
        max_nodes=max_nodes,
    )
    if graph_data is not None:
        graph = validate_graph_data(graph_data, **field_options)
        warning = None
    else:
        rows = resolve_records(records, query_error, "graphData")
        if not source_field or not target_field:
            raise InvalidInput("sourceField and targetField are required for flat data")
        # Relationship rows outnumber nodes
        limit = max_nodes * 2
        prepared = prepare_or_raise(rows, [source_field, target_field], limit)
        graph = build_graph_data(prepared["data"], source_field, target_field, **field_options)
        warning = truncation_warning(prepared, limit)

    if not graph["nodes"]:
        raise EmptyResult("No nodes generated from data")
    payload = detach({**graph, "nodeGroups": node_groups(graph["nodes"]), "truncatedWarning": warning})
    for node in payload["nodes"]:
        node["shortLabel"] = truncate_label(node.get("label"))
    return payload


def build_flow_chart(
    records: Optional[Sequence[Mapping]] = None,
    flow_data: Optional[Mapping] = None,
    source_field: Optional[str] = None,
    target_field: Optional[str] = None,
    value_field: Optional[str] = None,
    query_error: Optional[str] = None,
    limit: Optional[int] = None,
    value_format: str = "number",
    currency: str = "USD",
) -> Dict[str, Any]:
    """Sankey: {nodes, links, totalValue, formattedTotal, truncatedWarning}; duplicate pairs merged."""
    warning = None
    if flow_data is not None:
        graph = validate_flow_data(flow_data)
    else:
        rows = resolve_records(records, query_error, "flowData")
        if not source_field or not target_field:
            raise InvalidInput("sourceField and targetField are required for flat data")
        required = [source_field, target_field] + ([value_field] if value_field else [])
        limit = MAX_RECORDS if limit is None else limit
        prepared = prepare_or_raise(rows, required, limit)
        graph = build_flow_data(prepared["data"], source_field, target_field, value_field)
        warning = truncation_warning(prepared, limit)

    if not graph["nodes"]:
        raise EmptyResult("No nodes generated from data")
    if not graph["links"]:
        raise EmptyResult("No links generated from data")
    total = flow_total(graph["links"])
    return detach({
        **graph,
        "totalValue": total,
        "formattedTotal": format_value(total, value_format, currency),
        "truncatedWarning": warning,
    })


def build_gauge_chart(
    records: Optional[Sequence[Mapping]] = None,
    value_field: Optional[str] = None,
    query_error: Optional[str] = None,
    value_format: str = "number",
    currency: str = "USD",
) -> Dict[str, Any]:
    """Gauge: {value, formattedValue} read from the first record; 0 when there are no records."""
    if not value_field:
        raise InvalidInput("valueField is required")
    if query_error is not None and not records:
        raise DataSourceError(f"Query Error: {query_error or 'Query failed'}")
    value = 0
    if records and isinstance(records[0], Mapping):
        value = to_finite(records[0].get(value_field)) or 0
    return {"value": value, "formattedValue": format_value(value, value_format, currency)}


def build_histogram_chart(
    records: Optional[Sequence[Mapping]] = None,
    value_field: Optional[str] = None,
    query_error: Optional[str] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """Histogram: {values, statistics, truncatedWarning}."""
    if not value_field:
        raise InvalidInput("valueField is required")
    rows = resolve_records(records, query_error)
    limit = MAX_RECORDS if limit is None else limit
    prepared = prepare_or_raise(rows, [value_field], limit)

    values = extract_numeric(prepared["data"], value_field)
    if not values:
        raise EmptyResult("No valid numeric values found in data")
    return {
        "values": values,
        "statistics": describe(values),
        "truncatedWarning": truncation_warning(prepared, limit),
    }


def build_scatter_chart(
    records: Optional[Sequence[Mapping]] = None,
    x_field: Optional[str] = None,
    y_field: Optional[str] = None,
    group_field: Optional[str] = None,
    record_id_field: str = "Id",
    query_error: Optional[str] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """Scatter plot: {points, groups, correlation, truncatedWarning}."""
    if not x_field or not y_field:
        raise InvalidInput("xField and yField are required")
    rows = resolve_records(records, query_error)
    limit = MAX_RECORDS if limit is None else limit
    prepared = prepare_or_raise(rows, [x_field, y_field], limit)

    points = []
    groups: Dict[str, None] = {}
    for record in prepared["data"]:
        x, y = to_finite(record.get(x_field)), to_finite(record.get(y_field))
        if x is None or y is None:
            continue
        group = str(record.get(group_field) or "Other") if group_field else "default"
        groups.setdefault(group, None)
        points.append({"x": x, "y": y, "id": record.get(record_id_field), "group": group, "record": record})

    if not points:
        raise EmptyResult("No valid data points after processing")
    return detach({
        "points": points,
        "groups": sorted(groups),
        "correlation": pearson([(p["x"], p["y"]) for p in points]),
        "truncatedWarning": truncation_warning(prepared, limit),
    })
