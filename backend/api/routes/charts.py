"""Chart API - one endpoint per chart kind, each returning the render-ready payload."""

from fastapi import APIRouter

from charts import (
    build_flow_chart,
    build_force_graph,
    build_gauge_chart,
    build_histogram_chart,
    build_scatter_chart,
    build_series_chart,
    build_treemap_chart,
)
from shared.errors import VizError

from ..responses import error_response
from ..schemas import (
    FlowChartRequest,
    ForceGraphRequest,
    GaugeChartRequest,
    HistogramChartRequest,
    ScatterChartRequest,
    SeriesChartRequest,
    TreemapChartRequest,
)

router = APIRouter()


def _run(build, **kwargs):
    try:
        return build(**kwargs)
    except VizError as e:
        return error_response(e)


@router.post("/series")
async def series_chart(body: SeriesChartRequest):
    return _run(
        build_series_chart,
        records=body.records,
        group_field=body.group_field,
        value_field=body.value_field,
        operation=body.operation,
        query_error=body.query_error,
        limit=body.limit,
        value_format=body.value_format,
        currency=body.currency,
    )


@router.post("/treemap")
async def treemap_chart(body: TreemapChartRequest):
    return _run(
        build_treemap_chart,
        records=body.records,
        hierarchy_data=body.hierarchy_data,
        group_field=body.group_field,
        secondary_group_field=body.secondary_group_field,
        value_field=body.value_field,
        operation=body.operation,
        query_error=body.query_error,
        limit=body.limit,
        value_format=body.value_format,
        currency=body.currency,
    )


@router.post("/force-graph")
async def force_graph(body: ForceGraphRequest):
    return _run(
        build_force_graph,
        records=body.records,
        graph_data=body.graph_data,
        source_field=body.source_field,
        target_field=body.target_field,
        node_id_field=body.node_id_field,
        node_label_field=body.node_label_field,
        node_size_field=body.node_size_field,
        node_type_field=body.node_type_field,
        link_weight_field=body.link_weight_field,
        max_nodes=body.max_nodes,
        query_error=body.query_error,
    )


@router.post("/flow")
async def flow_chart(body: FlowChartRequest):
    return _run(
        build_flow_chart,
        records=body.records,
        flow_data=body.flow_data,
        source_field=body.source_field,
        target_field=body.target_field,
        value_field=body.value_field,
        query_error=body.query_error,
        limit=body.limit,
        value_format=body.value_format,
        currency=body.currency,
    )


@router.post("/gauge")
async def gauge_chart(body: GaugeChartRequest):
    return _run(
        build_gauge_chart,
        records=body.records,
        value_field=body.value_field,
        query_error=body.query_error,
        value_format=body.value_format,
        currency=body.currency,
    )


@router.post("/histogram")
async def histogram_chart(body: HistogramChartRequest):
    return _run(
        build_histogram_chart,
        records=body.records,
        value_field=body.value_field,
        query_error=body.query_error,
        limit=body.limit,
    )


@router.post("/scatter")
async def scatter_chart(body: ScatterChartRequest):
    return _run(
        build_scatter_chart,
        records=body.records,
        x_field=body.x_field,
        y_field=body.y_field,
        group_field=body.group_field,
        record_id_field=body.record_id_field,
        query_error=body.query_error,
        limit=body.limit,
    )
