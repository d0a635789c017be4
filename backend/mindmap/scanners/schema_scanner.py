import logging
from typing import List, Optional, Set

from mindmap.config import DEFAULT_SCHEMA
from mindmap.graph.types import Graph, Link, LinkKind, Node, NodeKind
from mindmap.ir.schema_model import (
    EntityInfo,
    ForeignKeyInfo,
    SchemaModel,
    entity_node_id,
)


logger = logging.getLogger(__name__)


class SchemaGraphBuilder:
    """
    Builds the entity / join-table graph of an ORM model.

    The produced graph is undirected for de-duplication: a pair of entities
    is connected by at most one link, whichever foreign key is seen first.
    """

    def __init__(self, default_schema: str = DEFAULT_SCHEMA):
        self.default_schema = default_schema

    def build(self, model: Optional[SchemaModel]) -> Graph:
        graph = Graph(undirected=True)
        if model is None:
            return graph

        processed: Set[str] = set()
        entities: List[EntityInfo] = []
        for entity in model.entities:
            if entity.is_owned:
                continue
            if entity.node_id in processed:
                continue
            processed.add(entity.node_id)
            entities.append(entity)

            graph.add_node_if_absent(self._entity_node(entity))

        # Links after nodes so that principals declared later already exist
        for entity in entities:
            for foreign_key in entity.foreign_keys:
                self._add_relationship(graph, model, entity, foreign_key)

        logger.info(
            "Schema scan: %d entities -> %d nodes, %d links",
            len(model.entities), len(graph.nodes), len(graph.links),
        )
        return graph

    # -------------------------
    # Nodes
    # -------------------------

    def _entity_node(self, entity: EntityInfo) -> Node:
        is_join_table = entity.is_join_table()
        fk_columns = entity.foreign_key_columns()
        pk_columns = set(entity.primary_key)

        columns = [
            {
                "name": prop.name,
                "type": prop.type_name,
                "isNullable": prop.nullable,
                "isPrimaryKey": prop.is_primary_key or prop.name in pk_columns,
                "isForeignKey": prop.is_foreign_key or prop.name in fk_columns,
            }
            for prop in entity.properties
        ]

        return Node(
            id=entity.node_id,
            kind=NodeKind.JOIN_TABLE if is_join_table else NodeKind.ENTITY,
            label=entity.type_name,
            attributes={
                "entityName": entity.type_name,
                "tableName": entity.table_name or entity.type_name,
                "schema": entity.schema or self.default_schema,
                "isJoinTable": is_join_table,
                "columns": columns,
                "primaryKeys": list(entity.primary_key),
            },
        )

    # -------------------------
    # Links
    # -------------------------

    def _add_relationship(
        self,
        graph: Graph,
        model: SchemaModel,
        entity: EntityInfo,
        foreign_key: ForeignKeyInfo,
    ) -> None:
        declaring = model.find(foreign_key.declaring_entity) or entity
        source_id = entity_node_id(declaring.type_name)
        target_id = entity_node_id(foreign_key.principal_entity)

        if not graph.has_node(target_id):
            logger.debug(
                "Skipping FK %s -> %s: principal is not a mapped entity",
                declaring.type_name, foreign_key.principal_entity,
            )
            return

        graph.add_link_if_absent(Link(
            source=source_id,
            target=target_id,
            kind=relationship_kind(foreign_key, declaring),
            attributes={
                "foreignKeyName": constraint_name(foreign_key),
                "foreignKeyColumns": list(foreign_key.columns),
                "principalKeyColumns": list(foreign_key.principal_columns),
                "isRequired": foreign_key.is_required,
                "deleteAction": foreign_key.delete_behavior,
            },
        ))


def relationship_kind(foreign_key: ForeignKeyInfo, declaring: EntityInfo) -> str:
    if foreign_key.is_unique:
        return LinkKind.ONE_TO_ONE
    if declaring.is_join_table():
        return LinkKind.MANY_TO_MANY
    return LinkKind.ONE_TO_MANY


def constraint_name(foreign_key: ForeignKeyInfo) -> str:
    if foreign_key.constraint_name:
        return foreign_key.constraint_name
    return f"FK_{foreign_key.declaring_entity}_{foreign_key.principal_entity}"


def build_schema_graph(model: Optional[SchemaModel], default_schema: str = DEFAULT_SCHEMA) -> Graph:
    return SchemaGraphBuilder(default_schema).build(model)
