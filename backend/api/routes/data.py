"""Data API - prepare and aggregate flat records."""

from fastapi import APIRouter

from charts import prepare_or_raise, required_value_fields
from shaping import Operation, aggregate_data, prepare_data, series_total
from shared.errors import VizError
from shared.utils import detach

from ..responses import error_response
from ..schemas import AggregateRequest, PrepareRequest

router = APIRouter()


@router.post("/prepare")
async def prepare_route(body: PrepareRequest):
    """Validation failures are reported in the body (valid=false), not as an HTTP error."""
    result = prepare_data(
        body.data,
        required_fields=body.required_fields,
        limit=body.limit,
        validate_all_rows=body.validate_all_rows,
    )
    return detach(result)


@router.post("/aggregate")
async def aggregate_route(body: AggregateRequest):
    operation = Operation.parse(body.operation)
    try:
        required = required_value_fields(body.group_field, body.value_field, operation)
        prepared = prepare_or_raise(body.data, required)
    except VizError as e:
        return error_response(e)
    series = aggregate_data(prepared["data"], body.group_field, body.value_field, operation)
    return {"series": series, "totalValue": series_total(series), "truncated": prepared["truncated"]}
