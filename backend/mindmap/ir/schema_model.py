from dataclasses import dataclass, field
from typing import Dict, List, Optional


# -------------------------
# Entity-relationship facts
# -------------------------

@dataclass
class PropertyInfo:
    name: str
    type_name: str = "object"
    nullable: bool = True
    is_primary_key: bool = False
    is_foreign_key: bool = False


@dataclass
class ForeignKeyInfo:
    declaring_entity: str
    principal_entity: str
    columns: List[str] = field(default_factory=list)
    principal_columns: List[str] = field(default_factory=list)
    is_unique: bool = False
    is_required: bool = False
    delete_behavior: str = "NoAction"
    constraint_name: Optional[str] = None


@dataclass
class EntityInfo:
    type_name: str
    table_name: Optional[str] = None
    schema: Optional[str] = None
    is_owned: bool = False
    properties: List[PropertyInfo] = field(default_factory=list)
    primary_key: List[str] = field(default_factory=list)
    foreign_keys: List[ForeignKeyInfo] = field(default_factory=list)

    @property
    def node_id(self) -> str:
        return entity_node_id(self.type_name)

    def foreign_key_columns(self) -> set:
        columns = {c for fk in self.foreign_keys for c in fk.columns}
        columns.update(p.name for p in self.properties if p.is_foreign_key)
        return columns

    def is_join_table(self) -> bool:
        """
        Composite PK of two or more columns, two or more FKs, and every PK
        column is an FK column. Derived from key facts only, never names.
        """
        if len(self.primary_key) < 2:
            return False
        if len(self.foreign_keys) < 2:
            return False
        fk_columns = self.foreign_key_columns()
        return all(column in fk_columns for column in self.primary_key)


@dataclass
class SchemaModel:
    entities: List[EntityInfo] = field(default_factory=list)

    def __post_init__(self):
        self._by_name: Dict[str, EntityInfo] = {}
        for entity in self.entities:
            self._by_name.setdefault(entity.type_name, entity)

    def find(self, type_name: str) -> Optional[EntityInfo]:
        return self._by_name.get(type_name)


def entity_node_id(type_name: str) -> str:
    return f"Entity.{type_name}"
