from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional


class MindmapNode(BaseModel):
    id: str
    type: str
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class MindmapLink(BaseModel):
    source: str
    target: str
    type: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class MindmapGraph(BaseModel):
    """JSON document consumed by the rendering layer"""
    nodes: List[MindmapNode] = []
    links: List[MindmapLink] = []


class MindmapConfig(BaseModel):
    """UI settings served at /api/mindmap/config, camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    default_view: str
    theme: str
    enable_export: bool
    title: str
    enable_caching: bool
    enable_database_analyzer: bool
