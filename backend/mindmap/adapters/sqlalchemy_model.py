"""
Read SQLAlchemy metadata into a SchemaModel.

Accepted sources: a declarative base (``declarative_base()`` or a
``DeclarativeBase`` subclass), a ``registry``, a bare ``MetaData``, or None.
Mapped classes name their entities; tables without a mapped class are
named after the table.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, ForeignKeyConstraint, Index, MetaData, Table, UniqueConstraint
from sqlalchemy.exc import NoReferencedColumnError, NoReferencedTableError
from sqlalchemy.orm import Mapper, registry as Registry

from mindmap.ir.schema_model import EntityInfo, ForeignKeyInfo, PropertyInfo, SchemaModel


logger = logging.getLogger(__name__)


DELETE_BEHAVIORS = {
    "CASCADE": "Cascade",
    "SET NULL": "SetNull",
    "SET DEFAULT": "SetDefault",
    "RESTRICT": "Restrict",
    "NO ACTION": "NoAction",
}


def read_schema_model(source: Any) -> SchemaModel:
    if source is None:
        return SchemaModel()

    if isinstance(source, MetaData):
        return _from_tables(list(source.tables.values()), {})

    registry = source if isinstance(source, Registry) else getattr(source, "registry", None)
    if isinstance(registry, Registry):
        return _from_registry(registry)

    metadata = getattr(source, "metadata", None)
    if isinstance(metadata, MetaData):
        return _from_tables(list(metadata.tables.values()), {})

    logger.warning("Unsupported schema source %r; using an empty model", type(source).__name__)
    return SchemaModel()


def _from_registry(registry: Registry) -> SchemaModel:
    mappers: List[Mapper] = sorted(registry.mappers, key=lambda m: m.class_.__name__)

    names: Dict[Table, str] = {}
    owned: List[Mapper] = []
    for mapper in mappers:
        table = mapper.local_table
        if mapper.single or not isinstance(table, Table):
            # Single-table inheritance: rows live in the parent's table
            owned.append(mapper)
            continue
        names.setdefault(table, mapper.class_.__name__)

    entities = _from_tables(list(registry.metadata.tables.values()), names).entities
    entities.extend(EntityInfo(type_name=m.class_.__name__, is_owned=True) for m in owned)
    return SchemaModel(entities=entities)


def _from_tables(tables: List[Table], names: Dict[Table, str]) -> SchemaModel:
    entities = [_entity(table, names) for table in tables]
    entities.sort(key=lambda e: e.type_name)
    return SchemaModel(entities=entities)


# -------------------------
# Per-table facts
# -------------------------

def _entity(table: Table, names: Dict[Table, str]) -> EntityInfo:
    entity_name = names.get(table, table.name)
    primary_key = [column.name for column in table.primary_key.columns]

    fk_column_names = {fk.parent.name for fk in table.foreign_keys}
    properties = [
        PropertyInfo(
            name=column.name,
            type_name=_type_name(column),
            nullable=bool(column.nullable),
            is_primary_key=column.primary_key,
            is_foreign_key=column.name in fk_column_names,
        )
        for column in table.columns
    ]

    constraints = sorted(
        table.foreign_key_constraints,
        key=lambda c: (_referred_table_name(c), tuple(c.column_keys)),
    )
    foreign_keys = [
        fk for fk in (_foreign_key(c, table, entity_name, names) for c in constraints)
        if fk is not None
    ]

    return EntityInfo(
        type_name=entity_name,
        table_name=table.name,
        schema=table.schema,
        properties=properties,
        primary_key=primary_key,
        foreign_keys=foreign_keys,
    )


def _foreign_key(
    constraint: ForeignKeyConstraint,
    table: Table,
    entity_name: str,
    names: Dict[Table, str],
) -> Optional[ForeignKeyInfo]:
    try:
        referred = constraint.referred_table
    except (NoReferencedTableError, NoReferencedColumnError) as exc:
        logger.warning("Skipping FK on %s: %s", table.name, exc)
        return None

    # Column objects, not table.c lookups: table.c is keyed by Column.key
    parents = [element.parent for element in constraint.elements]

    return ForeignKeyInfo(
        declaring_entity=entity_name,
        principal_entity=names.get(referred, referred.name),
        columns=[column.name for column in parents],
        principal_columns=[_principal_column(element) for element in constraint.elements],
        is_unique=_is_unique(table, parents),
        is_required=all(not column.nullable for column in parents),
        delete_behavior=_delete_behavior(constraint.ondelete),
        constraint_name=constraint.name if isinstance(constraint.name, str) else None,
    )


def _principal_column(element) -> str:
    try:
        return element.column.name
    except (NoReferencedTableError, NoReferencedColumnError):
        return element.target_fullname.rsplit(".", 1)[-1]


def _referred_table_name(constraint: ForeignKeyConstraint) -> str:
    try:
        return constraint.referred_table.fullname
    except (NoReferencedTableError, NoReferencedColumnError):
        return ""


def _is_unique(table: Table, columns: List[Column]) -> bool:
    wanted = {column.name for column in columns}
    if not wanted:
        return False
    if wanted == {c.name for c in table.primary_key.columns}:
        return True
    if len(columns) == 1 and columns[0].unique:
        return True
    for constraint in table.constraints:
        if isinstance(constraint, UniqueConstraint) and {c.name for c in constraint.columns} == wanted:
            return True
    for index in table.indexes:
        if isinstance(index, Index) and index.unique and {c.name for c in index.columns} == wanted:
            return True
    return False


def _delete_behavior(ondelete: Optional[str]) -> str:
    if not ondelete:
        return "NoAction"
    key = ondelete.strip().upper()
    return DELETE_BEHAVIORS.get(key, key.title().replace(" ", ""))


def _type_name(column: Column) -> str:
    try:
        return column.type.python_type.__name__
    except NotImplementedError:
        return type(column.type).__name__
