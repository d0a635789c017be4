"""Tests for describing Python annotations as TypeShapes."""

import enum
import inspect
from dataclasses import dataclass
from typing import Annotated, Awaitable, ClassVar, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from mindmap.adapters.python_types import describe_type, public_members
from mindmap.ir.shapes import ShapeKind


class Color(enum.Enum):
    RED = 1


class AddressModel(BaseModel):
    city: str


class CustomerModel(BaseModel):
    name: str
    address: AddressModel


class EmptyModel(BaseModel):
    pass


@dataclass
class TreeNode:
    value: int
    children: List["TreeNode"]


T = TypeVar("T")


@dataclass
class Envelope(Generic[T]):
    data: T
    items: List[T]
    total: int


class Plain:
    label: str
    count: int
    LIMIT: ClassVar[int] = 3

    @property
    def size(self) -> int:
        return 0


def test_scalars():
    for annotation in (int, str, bool, None, type(None), Color):
        assert describe_type(annotation).kind == ShapeKind.SCALAR


def test_missing_annotation_describes_nothing():
    assert describe_type(inspect.Parameter.empty) is None
    assert describe_type(inspect.Signature.empty) is None


def test_optional_is_a_single_argument_wrapper():
    for annotation in (Optional[AddressModel], AddressModel | None):
        shape = describe_type(annotation)
        assert shape.kind == ShapeKind.GENERIC
        assert shape.name == "Optional"
        assert [a.name for a in shape.args] == ["AddressModel"]


def test_union_keeps_all_arguments():
    shape = describe_type(AddressModel | CustomerModel)
    assert shape.name == "Union"
    assert len(shape.args) == 2


def test_collections_and_ellipsis():
    assert describe_type(List[AddressModel]).name == "list"
    assert describe_type(list[AddressModel]).namespace == "builtins"

    variadic = describe_type(tuple[AddressModel, ...])
    assert variadic.name == "tuple"
    assert len(variadic.args) == 1


def test_awaitable():
    shape = describe_type(Awaitable[CustomerModel])
    assert shape.name == "Awaitable"
    assert shape.args[0].name == "CustomerModel"


def test_annotated_is_stripped():
    assert describe_type(Annotated[AddressModel, "meta"]).name == "AddressModel"


def test_pydantic_members_in_declaration_order():
    shape = describe_type(CustomerModel)

    assert shape.kind == ShapeKind.OBJECT
    assert shape.key == f"{__name__}.CustomerModel"
    assert [m.name for m in shape.resolve_members()] == ["name", "address"]


def test_pydantic_base_properties_are_not_members():
    assert describe_type(EmptyModel).resolve_members() == []


def test_self_referential_dataclass():
    shape = describe_type(TreeNode)
    members = {m.name: m.shape for m in shape.resolve_members()}

    assert list(members) == ["value", "children"]
    children = members["children"]
    assert children.kind == ShapeKind.GENERIC
    assert children.args[0].key == shape.key


def test_plain_class_annotations_and_properties():
    names = [m.name for m in public_members(Plain)]
    assert names == ["label", "count", "size"]


def test_members_are_cached():
    shape = describe_type(CustomerModel)
    assert shape.resolve_members() is shape.resolve_members()


def test_generic_members_are_closed_over_arguments():
    shape = describe_type(Envelope[AddressModel])
    members = {m.name: m.shape for m in shape.resolve_members()}

    assert shape.kind == ShapeKind.GENERIC
    assert members["data"].name == "AddressModel"
    assert members["data"].kind == ShapeKind.OBJECT
    assert members["items"].args[0].name == "AddressModel"
    assert members["total"].kind == ShapeKind.SCALAR


def test_each_parameterization_has_its_own_key():
    addresses = describe_type(Envelope[AddressModel])
    customers = describe_type(Envelope[CustomerModel])

    assert addresses.key != customers.key
    assert addresses.key == describe_type(Envelope[AddressModel]).key


def test_open_generic_keeps_type_variables():
    members = {m.name: m.shape for m in describe_type(Envelope).resolve_members()}
    assert members["data"].kind == ShapeKind.SCALAR
