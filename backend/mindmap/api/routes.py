import dataclasses
import logging
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request

from mindmap.adapters.fastapi_routes import collect_operations
from mindmap.adapters.sqlalchemy_model import read_schema_model
from mindmap.api.serializers import serialize_graph
from mindmap.classifier.type_classifier import TypeClassifier
from mindmap.config import INTERNAL_TAG, MindmapOptions, load_options
from mindmap.graph.validator import log_validation, validate_graph
from mindmap.scanners.endpoint_scanner import EndpointGraphBuilder
from mindmap.scanners.schema_scanner import SchemaGraphBuilder
from mindmap.schemas import MindmapConfig, MindmapGraph


logger = logging.getLogger(__name__)


def create_mindmap_router(
    options: Optional[MindmapOptions] = None,
    schema_source: Any = None,
) -> APIRouter:
    """
    Router exposing the extracted graphs.

    Every request runs a fresh extraction pass over the live metadata; the
    builders hold no state between requests.
    """
    options = options or load_options()
    classifier = TypeClassifier.from_options(options)

    router = APIRouter(tags=[INTERNAL_TAG])

    @router.get("/api/mindmap", response_model=MindmapGraph, name="GetApiMindmap")
    def get_api_mindmap(request: Request):
        operations = collect_operations(request.app)
        graph = EndpointGraphBuilder(classifier).build(operations)
        log_validation(validate_graph(graph), "Endpoint")
        return serialize_graph(graph)

    @router.get(
        "/api/mindmap/config",
        response_model=MindmapConfig,
        name="GetApiMindmapConfig",
        include_in_schema=False,
    )
    def get_api_mindmap_config():
        return MindmapConfig(**options.ui_settings())

    @router.get(
        "/mindmap/database.json",
        response_model=MindmapGraph,
        name="GetDatabaseSchema",
        include_in_schema=False,
    )
    def get_database_schema():
        if not options.enable_database_analyzer or schema_source is None:
            raise HTTPException(status_code=404, detail="Database analyzer is not enabled")

        model = read_schema_model(schema_source)
        graph = SchemaGraphBuilder(options.default_schema).build(model)
        log_validation(validate_graph(graph), "Schema")
        return serialize_graph(graph)

    return router


def include_mindmap(
    app: FastAPI,
    options: Optional[MindmapOptions] = None,
    schema_source: Any = None,
) -> FastAPI:
    """Mount the mindmap routes; passing a schema source enables the database analyzer."""
    options = options or load_options()
    if schema_source is not None and not options.enable_database_analyzer:
        options = dataclasses.replace(options, enable_database_analyzer=True)

    app.include_router(create_mindmap_router(options, schema_source))
    logger.info(
        "API mindmap mounted (database analyzer %s)",
        "on" if options.enable_database_analyzer else "off",
    )
    return app
