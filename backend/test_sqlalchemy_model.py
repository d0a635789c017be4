"""Tests for reading SQLAlchemy metadata into a SchemaModel."""

import pytest
from sqlalchemy import Column, ForeignKey, Integer, MetaData, String, Table, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from mindmap.adapters.sqlalchemy_model import read_schema_model
from mindmap.example.entities import Base
from mindmap.scanners import build_schema_graph


@pytest.fixture(scope="module")
def shop():
    return read_schema_model(Base)


def test_entities_are_named_after_mapped_classes(shop):
    assert [e.type_name for e in shop.entities] == [
        "Address",
        "Order",
        "OrderItem",
        "Product",
        "ProductTag",
        "Review",
        "Tag",
        "User",
    ]
    assert shop.find("OrderItem").table_name == "order_items"


def test_association_class_is_a_join_table(shop):
    product_tag = shop.find("ProductTag")

    assert product_tag.is_join_table()
    assert product_tag.primary_key == ["product_id", "tag_id"]
    assert [fk.principal_entity for fk in product_tag.foreign_keys] == ["Product", "Tag"]
    assert all(fk.delete_behavior == "Cascade" for fk in product_tag.foreign_keys)
    assert all(fk.is_required for fk in product_tag.foreign_keys)


def test_foreign_key_facts(shop):
    order = shop.find("Order")

    assert [(fk.principal_entity, fk.columns) for fk in order.foreign_keys] == [
        ("Address", ["shipping_address_id"]),
        ("User", ["user_id"]),
    ]
    user_fk = order.foreign_keys[1]
    assert user_fk.principal_columns == ["id"]
    assert user_fk.delete_behavior == "Restrict"
    assert not user_fk.is_unique
    assert not shop.find("User").is_join_table()


def test_column_facts(shop):
    columns = {p.name: p for p in shop.find("Product").properties}

    assert columns["id"].is_primary_key
    assert columns["name"].type_name == "str"
    assert not columns["name"].nullable
    assert columns["price"].type_name == "Decimal"
    assert columns["stock"].type_name == "int"
    assert shop.find("Review").properties[1].is_foreign_key


def test_example_schema_graph(shop):
    graph = build_schema_graph(shop)

    assert graph.get_node("Entity.ProductTag").kind == "join-table"
    assert graph.get_node("Entity.Order").kind == "entity"
    assert len(graph.links) == 9
    assert {l.kind for l in graph.links if l.source == "Entity.ProductTag"} == {"many-to-many"}
    assert graph.has_link("Entity.Address", "Entity.User")


def test_metadata_only_source():
    metadata = MetaData()
    Table("parents", metadata, Column("id", Integer, primary_key=True))
    Table(
        "children",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("parent_id", Integer, ForeignKey("parents.id", ondelete="SET NULL"), unique=True),
    )
    Table(
        "profiles",
        metadata,
        Column("parent_id", Integer, ForeignKey("parents.id"), primary_key=True),
    )
    Table(
        "memberships",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("a_id", Integer, ForeignKey("parents.id")),
        Column("b_id", Integer, ForeignKey("children.id")),
        UniqueConstraint("a_id", "b_id"),
    )

    model = read_schema_model(metadata)

    assert [e.type_name for e in model.entities] == ["children", "memberships", "parents", "profiles"]
    child_fk = model.find("children").foreign_keys[0]
    assert child_fk.is_unique
    assert child_fk.delete_behavior == "SetNull"
    assert not child_fk.is_required
    assert model.find("profiles").foreign_keys[0].is_unique
    assert not any(fk.is_unique for fk in model.find("memberships").foreign_keys)

    graph = build_schema_graph(model)
    assert graph.links[0].kind == "one-to-one"


def test_columns_with_a_distinct_key():
    metadata = MetaData()
    Table("users", metadata, Column("id", Integer, primary_key=True))
    Table(
        "orders",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("user_id", Integer, ForeignKey("users.id"), key="owner", nullable=False),
        Column("reviewer_id", Integer, ForeignKey("users.id"), key="reviewer", unique=True),
    )

    orders = read_schema_model(metadata).find("orders")

    by_column = {fk.columns[0]: fk for fk in orders.foreign_keys}
    assert set(by_column) == {"user_id", "reviewer_id"}
    assert by_column["user_id"].is_required
    assert not by_column["user_id"].is_unique
    assert by_column["reviewer_id"].is_unique
    assert not by_column["reviewer_id"].is_required
    assert [p.name for p in orders.properties] == ["id", "user_id", "reviewer_id"]


def test_unresolvable_foreign_key_is_skipped():
    metadata = MetaData()
    Table(
        "orphans",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("ghost_id", Integer, ForeignKey("ghosts.id")),
    )

    orphans = read_schema_model(metadata).find("orphans")

    assert orphans.foreign_keys == []
    assert [p.is_foreign_key for p in orphans.properties] == [False, True]


class Zoo(DeclarativeBase):
    pass


class Animal(Zoo):
    __tablename__ = "animals"

    id: Mapped[int] = mapped_column(primary_key=True)
    kind: Mapped[str] = mapped_column(String(20))

    __mapper_args__ = {"polymorphic_on": "kind", "polymorphic_identity": "animal"}


class Dog(Animal):
    __mapper_args__ = {"polymorphic_identity": "dog"}


def test_single_table_inheritance_is_owned():
    model = read_schema_model(Zoo)

    assert model.find("Dog").is_owned
    assert not model.find("Animal").is_owned
    assert [n.id for n in build_schema_graph(model).nodes] == ["Entity.Animal"]


def test_unsupported_sources():
    assert read_schema_model(None).entities == []
    assert read_schema_model(object()).entities == []
