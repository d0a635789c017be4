"""
Read a FastAPI route table into OperationDescriptors.

Only ``APIRoute`` entries describe operations; mounts, websocket routes and
static files are ignored, as are the mindmap's own routes.
"""

import inspect
import logging
import re
from typing import Any, Iterable, List, Sequence

from fastapi import FastAPI
from fastapi.routing import APIRoute, APIRouter

from mindmap.adapters.python_types import resolve_type_hints, describe_type
from mindmap.config import INTERNAL_TAG
from mindmap.ir.operations import UNKNOWN_METHOD, OperationDescriptor, ParameterDescriptor


logger = logging.getLogger(__name__)


DEFAULT_RESOURCE = "Default"
_VERSION_SEGMENT = re.compile(r"v\d+(\.\d+)*", re.IGNORECASE)


def collect_operations(
    source: Any,
    exclude_tags: Sequence[str] = (INTERNAL_TAG,),
) -> List[OperationDescriptor]:
    """Descriptors for every APIRoute of an app, router or route list."""
    operations = []
    for route in _iter_routes(source):
        if not isinstance(route, APIRoute):
            continue
        if any(tag in exclude_tags for tag in route.tags or []):
            continue
        operations.append(describe_route(route))
    return operations


def _iter_routes(source: Any) -> Iterable[Any]:
    if source is None:
        return []
    if isinstance(source, (FastAPI, APIRouter)):
        return list(source.routes)
    return list(source)


def describe_route(route: APIRoute) -> OperationDescriptor:
    return OperationDescriptor(
        resource=resource_name(route),
        name=route.name,
        http_method=http_method(route),
        route=route.path,
        return_shape=_return_shape(route),
        parameters=_parameters(route),
        summary=route.summary,
        tags=[str(tag) for tag in route.tags or []],
    )


def resource_name(route: APIRoute) -> str:
    """First tag, else the first literal path segment, else 'Default'."""
    if route.tags:
        return str(route.tags[0])
    for segment in route.path.strip("/").split("/"):
        if not segment or segment.startswith("{"):
            continue
        if segment.lower() == "api" or _VERSION_SEGMENT.fullmatch(segment):
            continue
        return segment[:1].upper() + segment[1:]
    return DEFAULT_RESOURCE


def http_method(route: APIRoute) -> str:
    methods = sorted(route.methods or [])
    return methods[0] if methods else UNKNOWN_METHOD


def _return_shape(route: APIRoute):
    if route.response_model is not None:
        return describe_type(route.response_model)
    returns = resolve_type_hints(route.endpoint).get("return", inspect.Signature.empty)
    return describe_type(returns)


def _parameters(route: APIRoute) -> List[ParameterDescriptor]:
    try:
        signature = inspect.signature(route.endpoint)
    except (TypeError, ValueError) as exc:
        logger.warning("Cannot read parameters of %s: %s", route.name, exc)
        return []

    hints = resolve_type_hints(route.endpoint)
    parameters = []
    for name, parameter in signature.parameters.items():
        annotation = hints.get(name, parameter.annotation)
        shape = describe_type(annotation)
        if shape is None:
            continue
        parameters.append(ParameterDescriptor(name=name, shape=shape))
    return parameters

