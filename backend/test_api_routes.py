"""HTTP tests for the mindmap routes on the demo application."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from mindmap.api.routes import include_mindmap
from mindmap.config import MindmapOptions
from mindmap.main import create_app

client = TestClient(create_app())


def test_endpoint_graph():
    response = client.get("/api/mindmap")

    assert response.status_code == 200
    data = response.json()
    ids = {node["id"] for node in data["nodes"]}
    assert {
        "Controller.Orders",
        "Controller.Products",
        "Controller.Users",
        "Orders.get_order",
        "DTO.OrderDto",
        "DTO.AddressDto",
    } <= ids
    assert "Controller.ApiMindmap" not in ids

    links = {(l["source"], l["target"], l["type"]) for l in data["links"]}
    assert ("Controller.Orders", "Orders.get_order", "contains") in links
    assert ("Orders.get_order", "DTO.OrderDto", "returns") in links
    assert ("Orders.create_order", "DTO.CreateOrderDto", "accepts") in links
    assert ("DTO.OrderDto", "DTO.AddressDto", "references") in links
    assert ("DTO.OrderItemDetailDto", "DTO.ProductDto", "references") in links


def test_operation_node_payload():
    nodes = {n["id"]: n for n in client.get("/api/mindmap").json()["nodes"]}

    operation = nodes["Orders.get_order"]
    assert operation["type"] == "operation"
    assert operation["description"] == "GET get_order"
    assert operation["metadata"]["httpMethod"] == "GET"
    assert operation["metadata"]["route"] == "/api/orders/{id}"
    assert nodes["DTO.OrderDto"]["metadata"] == {
        "typeName": "OrderDto",
        "namespace": "mindmap.example.dtos",
    }


def test_endpoint_graph_is_stable_across_requests():
    assert client.get("/api/mindmap").json() == client.get("/api/mindmap").json()


def test_database_graph():
    response = client.get("/mindmap/database.json")

    assert response.status_code == 200
    data = response.json()
    kinds = {node["id"]: node["type"] for node in data["nodes"]}
    assert kinds["Entity.ProductTag"] == "join-table"
    assert kinds["Entity.User"] == "entity"
    assert len(data["links"]) == 9

    user = next(n for n in data["nodes"] if n["id"] == "Entity.User")
    assert user["metadata"]["tableName"] == "users"
    assert user["metadata"]["schema"] == "dbo"


def test_config_endpoint():
    response = client.get("/api/mindmap/config")

    assert response.status_code == 200
    assert response.json()["enableDatabaseAnalyzer"] is True
    assert set(response.json()) == {
        "defaultView",
        "theme",
        "enableExport",
        "title",
        "enableCaching",
        "enableDatabaseAnalyzer",
    }


def test_database_graph_disabled_without_source():
    app = include_mindmap(FastAPI(), MindmapOptions())
    response = TestClient(app).get("/mindmap/database.json")

    assert response.status_code == 404
    assert response.json()["detail"] == "Database analyzer is not enabled"


def test_app_without_routes_has_empty_graph():
    app = include_mindmap(FastAPI(), MindmapOptions())
    response = TestClient(app).get("/api/mindmap")

    assert response.status_code == 200
    assert response.json() == {"nodes": [], "links": []}
