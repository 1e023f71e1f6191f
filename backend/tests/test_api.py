"""Route tests through FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

import loader
from loader import LibraryLoader
from main import app

D3_SOURCE = "// https://d3js.org v7.9.0 Copyright 2010-2023 Mike Bostock\n(function(t,n){n(t.d3=t.d3||{})})(this,function(t){});"


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def fake_loader(monkeypatch):
    state = {"fail": False, "calls": 0, "contexts": []}

    async def load_script(context):
        state["calls"] += 1
        state["contexts"].append(context)
        if state["fail"]:
            raise FileNotFoundError(2, "No such file or directory", "/srv/vizcore/static/d3.min.js")
        return D3_SOURCE

    async def fetch_source(url):
        return None

    monkeypatch.setattr(
        loader, "library_loader", LibraryLoader(load_script=load_script, fetch_source=fetch_source, sources=[])
    )
    return state


class TestDataRoutes:
    def test_prepare_reports_invalid_in_body(self, client):
        resp = client.post("/api/data/prepare", json={"data": [{"a": 1}], "requiredFields": ["a", "b"], "limit": 10})
        assert resp.status_code == 200
        body = resp.json()
        assert body["valid"] is False
        assert body["missingFields"] == ["b"]

    def test_prepare_truncates(self, client):
        resp = client.post("/api/data/prepare", json={"data": [{"a": i} for i in range(5)], "limit": 3})
        body = resp.json()
        assert body["truncated"] is True
        assert body["originalCount"] == 5
        assert len(body["data"]) == 3

    def test_aggregate(self, client):
        data = [{"cat": "A", "v": 10}, {"cat": "A", "v": 20}, {"cat": "B", "v": 5}]
        resp = client.post("/api/data/aggregate", json={"data": data, "groupField": "cat", "valueField": "v", "operation": "Sum"})
        assert resp.status_code == 200
        assert resp.json()["series"] == [{"label": "A", "value": 30}, {"label": "B", "value": 5}]
        assert resp.json()["totalValue"] == 35

    def test_aggregate_rejects_empty(self, client):
        resp = client.post("/api/data/aggregate", json={"data": [], "groupField": "cat"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Data array is empty", "errorType": "InvalidInput"}

    def test_aggregate_sum_requires_value_field(self, client):
        data = [{"cat": "A", "v": 10}]
        resp = client.post("/api/data/aggregate", json={"data": data, "groupField": "cat", "operation": "Sum"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "valueField is required for Sum", "errorType": "InvalidInput"}

    def test_aggregate_count_without_value_field(self, client):
        data = [{"cat": "A"}, {"cat": "A"}, {"cat": "B"}]
        resp = client.post("/api/data/aggregate", json={"data": data, "groupField": "cat", "operation": "Count"})
        assert resp.status_code == 200
        assert resp.json()["totalValue"] == 3

    def test_aggregate_rejects_non_object_rows(self, client):
        data = [{"cat": "A", "v": 1}, "junk"]
        resp = client.post(
            "/api/data/aggregate", json={"data": data, "groupField": "cat", "valueField": "v", "operation": "Sum"}
        )
        assert resp.status_code == 400
        assert resp.json()["errorType"] == "InvalidInput"


class TestChartRoutes:
    def test_series(self, client):
        records = [{"Stage": "Won"}, {"Stage": "Won"}, {"Stage": "Lost"}]
        resp = client.post("/api/charts/series", json={"records": records, "groupField": "Stage", "operation": "Count"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["series"][0] == {"label": "Won", "value": 2}
        assert body["truncatedWarning"] is None

    def test_series_total_formatted_as_currency(self, client):
        records = [{"Stage": "Won", "Amount": 1200}, {"Stage": "Lost", "Amount": 34.4}]
        resp = client.post(
            "/api/charts/series",
            json={"records": records, "groupField": "Stage", "valueField": "Amount", "valueFormat": "currency"},
        )
        assert resp.json()["formattedTotal"] == "$1,234"

    def test_series_rejects_non_object_rows(self, client):
        records = [{"cat": "A", "v": 1}, "junk"]
        resp = client.post("/api/charts/series", json={"records": records, "groupField": "cat", "valueField": "v"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Data record at index 1 must be an object", "errorType": "InvalidInput"}

    def test_missing_fields_is_400(self, client):
        resp = client.post("/api/charts/series", json={"records": [{"a": 1}], "groupField": "b", "operation": "Count"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["errorType"] == "MissingFields"
        assert body["missingFields"] == ["b"]

    def test_query_error(self, client):
        resp = client.post("/api/charts/histogram", json={"queryError": "No such column 'Amount'", "valueField": "Amount"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Query Error: No such column 'Amount'"

    def test_force_graph(self, client):
        resp = client.post(
            "/api/charts/force-graph",
            json={"records": [{"s": "X", "t": "Y"}, {"s": "Y", "t": "Z"}], "sourceField": "s", "targetField": "t"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert [n["id"] for n in body["nodes"]] == ["X", "Y", "Z"]
        assert len(body["links"]) == 2

    def test_invalid_graph(self, client):
        resp = client.post("/api/charts/force-graph", json={"graphData": {"links": []}})
        assert resp.status_code == 400
        assert resp.json()["errorType"] == "InvalidGraph"

    def test_treemap_prebuilt(self, client):
        tree = {"name": "root", "children": [{"name": "a", "value": 2}]}
        resp = client.post("/api/charts/treemap", json={"hierarchyData": tree})
        assert resp.status_code == 200
        assert resp.json()["totalValue"] == 2

    def test_flow(self, client):
        resp = client.post(
            "/api/charts/flow",
            json={"records": [{"a": "X", "b": "Y"}, {"a": "X", "b": "Y"}], "sourceField": "a", "targetField": "b"},
        )
        assert resp.json()["totalValue"] == 2

    def test_gauge(self, client):
        resp = client.post("/api/charts/gauge", json={"records": [{"Pct": 42}], "valueField": "Pct"})
        assert resp.json() == {"value": 42, "formattedValue": "42"}

    def test_scatter(self, client):
        records = [{"x": 1, "y": 1}, {"x": 2, "y": 2}]
        resp = client.post("/api/charts/scatter", json={"records": records, "xField": "x", "yField": "y"})
        assert resp.status_code == 200
        assert resp.json()["correlation"] == pytest.approx(1.0)


class TestLibraryRoutes:
    def test_status_unloaded(self, client, fake_loader):
        resp = client.get("/api/library/status")
        assert resp.json() == {"state": "unloaded", "origin": None, "version": None}

    def test_load_then_status(self, client, fake_loader):
        resp = client.post("/api/library/load")
        assert resp.status_code == 200
        assert resp.json() == {"state": "loaded", "origin": "static", "version": "7.9.0"}

        client.post("/api/library/load")
        assert fake_loader["calls"] == 1

        client.post("/api/library/reset")
        assert client.get("/api/library/status").json()["state"] == "unloaded"

    def test_load_failure_is_503(self, client, fake_loader):
        fake_loader["fail"] = True
        resp = client.post("/api/library/load")
        assert resp.status_code == 503
        body = resp.json()
        assert body["errorType"] == "LoadFailed"
        assert body["attempts"] == ["static: FileNotFoundError"]
        assert "/srv/vizcore" not in resp.text

    def test_load_ignores_client_supplied_path(self, client, fake_loader):
        resp = client.post("/api/library/load", json={"context": "/etc/passwd"})
        assert resp.status_code == 200
        assert fake_loader["contexts"] == [None]
