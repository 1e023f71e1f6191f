"""Pydantic request schemas for API. Field aliases are the camelCase names chart clients send."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.config import MAX_NODES


class PrepareRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    data: Any = None
    required_fields: Optional[List[str]] = Field(default=None, alias="requiredFields")
    limit: Optional[int] = None
    validate_all_rows: bool = Field(default=False, alias="validateAllRows")


class AggregateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    data: Any = None
    group_field: str = Field(..., alias="groupField")
    value_field: Optional[str] = Field(default=None, alias="valueField")
    operation: str = "Count"


class ChartSourceRequest(BaseModel):
    """Records as returned by the upstream query, or the query's error message."""
    model_config = ConfigDict(populate_by_name=True)
    records: Optional[List[Any]] = None
    query_error: Optional[str] = Field(default=None, alias="queryError")


class FormattedChartRequest(ChartSourceRequest):
    """Charts that also return a display string for their total or reading."""
    value_format: str = Field(default="number", alias="valueFormat")
    currency: str = "USD"


class SeriesChartRequest(FormattedChartRequest):
    group_field: Optional[str] = Field(default=None, alias="groupField")
    value_field: Optional[str] = Field(default=None, alias="valueField")
    operation: str = "Sum"
    limit: Optional[int] = None


class TreemapChartRequest(SeriesChartRequest):
    hierarchy_data: Optional[Any] = Field(default=None, alias="hierarchyData")
    secondary_group_field: Optional[str] = Field(default=None, alias="secondaryGroupField")


class ForceGraphRequest(ChartSourceRequest):
    graph_data: Optional[Any] = Field(default=None, alias="graphData")
    source_field: Optional[str] = Field(default=None, alias="sourceField")
    target_field: Optional[str] = Field(default=None, alias="targetField")
    node_id_field: str = Field(default="Id", alias="nodeIdField")
    node_label_field: str = Field(default="Name", alias="nodeLabelField")
    node_size_field: Optional[str] = Field(default=None, alias="nodeSizeField")
    node_type_field: Optional[str] = Field(default=None, alias="nodeTypeField")
    link_weight_field: Optional[str] = Field(default=None, alias="linkWeightField")
    max_nodes: int = Field(default=MAX_NODES, alias="maxNodes", ge=1)


class FlowChartRequest(FormattedChartRequest):
    flow_data: Optional[Any] = Field(default=None, alias="flowData")
    source_field: Optional[str] = Field(default=None, alias="sourceField")
    target_field: Optional[str] = Field(default=None, alias="targetField")
    value_field: Optional[str] = Field(default=None, alias="valueField")
    limit: Optional[int] = None


class GaugeChartRequest(FormattedChartRequest):
    value_field: Optional[str] = Field(default=None, alias="valueField")


class HistogramChartRequest(ChartSourceRequest):
    value_field: Optional[str] = Field(default=None, alias="valueField")
    limit: Optional[int] = None


class ScatterChartRequest(ChartSourceRequest):
    x_field: Optional[str] = Field(default=None, alias="xField")
    y_field: Optional[str] = Field(default=None, alias="yField")
    group_field: Optional[str] = Field(default=None, alias="groupField")
    record_id_field: str = Field(default="Id", alias="recordIdField")
    limit: Optional[int] = None

