"""
Schema registry: the static description of every GraphQL type and field.

Each relation field names the batch loader that populates it and the parent
attribute used as the loader key. The registry is built once at import time,
is read-only afterwards, and is checked against the executable schema at
startup so that an unknown (type, field) pair can never surface mid-request.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

from graphql import (
    GraphQLObjectType,
    GraphQLSchema,
    get_named_type,
    get_nullable_type,
    is_list_type,
    is_non_null_type,
    is_object_type,
)

from ..store.base import Collection
from .errors import NotFoundError, SchemaRegistryError

ROOT_TYPE = "Query"


class FieldKind(Enum):
    SCALAR = "scalar"
    OBJECT = "object"
    LIST = "list"


@dataclass(frozen=True)
class FieldDescriptor:
    """Description of one field on one type.

    ``loader`` names the batch loader for a relation field and ``foreign_key``
    the attribute of the parent whose value is passed to it. Root fields carry
    neither; they are fetched straight from the store.
    """

    name: str
    kind: FieldKind
    nullable: bool = False
    target: str | None = None
    loader: str | None = None
    foreign_key: str | None = None
    owner: str = ""

    @property
    def is_relation(self) -> bool:
        return self.kind is not FieldKind.SCALAR

    @property
    def path(self) -> str:
        return f"{self.owner}.{self.name}"


@dataclass(frozen=True)
class TypeDeclaration:
    name: str
    fields: tuple[FieldDescriptor, ...]
    collection: Collection | None = None


def scalar(name: str, nullable: bool = False) -> FieldDescriptor:
    return FieldDescriptor(name=name, kind=FieldKind.SCALAR, nullable=nullable)


def one(
    name: str,
    target: str,
    loader: str | None = None,
    foreign_key: str | None = None,
    nullable: bool = False,
) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        kind=FieldKind.OBJECT,
        nullable=nullable,
        target=target,
        loader=loader,
        foreign_key=foreign_key,
    )


def many(
    name: str, target: str, loader: str | None = None, foreign_key: str | None = None
) -> FieldDescriptor:
    return FieldDescriptor(
        name=name, kind=FieldKind.LIST, target=target, loader=loader, foreign_key=foreign_key
    )


class SchemaRegistry:
    """Read-only lookup of (typeName, fieldName) -> FieldDescriptor."""

    def __init__(self, declarations: Iterable[TypeDeclaration]):
        types: dict[str, TypeDeclaration] = {}
        fields: dict[tuple[str, str], FieldDescriptor] = {}

        for declaration in declarations:
            if declaration.name in types:
                raise SchemaRegistryError(f"Type '{declaration.name}' declared twice")
            owned = []
            for descriptor in declaration.fields:
                key = (declaration.name, descriptor.name)
                if key in fields:
                    raise SchemaRegistryError(
                        f"Field '{declaration.name}.{descriptor.name}' declared twice"
                    )
                descriptor = replace(descriptor, owner=declaration.name)
                fields[key] = descriptor
                owned.append(descriptor)
            types[declaration.name] = replace(declaration, fields=tuple(owned))

        self._types = MappingProxyType(types)
        self._fields = MappingProxyType(fields)
        self._check_declarations()

    def _check_declarations(self) -> None:
        if ROOT_TYPE not in self._types:
            raise SchemaRegistryError(f"Root type '{ROOT_TYPE}' is not declared")

        for declaration in self._types.values():
            if declaration.name != ROOT_TYPE and declaration.collection is None:
                raise SchemaRegistryError(f"Type '{declaration.name}' has no collection")

        for descriptor in self._fields.values():
            if not descriptor.is_relation:
                if descriptor.target or descriptor.loader or descriptor.foreign_key:
                    raise SchemaRegistryError(
                        f"Scalar field '{descriptor.path}' cannot name a target or loader"
                    )
                continue
            if descriptor.target not in self._types or descriptor.target == ROOT_TYPE:
                raise SchemaRegistryError(
                    f"Field '{descriptor.path}' references undeclared type '{descriptor.target}'"
                )
            if descriptor.owner != ROOT_TYPE and not (descriptor.loader and descriptor.foreign_key):
                raise SchemaRegistryError(
                    f"Relation field '{descriptor.path}' needs a loader and a foreign key"
                )

    @property
    def types(self) -> MappingProxyType:
        return self._types

    def type(self, type_name: str) -> TypeDeclaration:
        try:
            return self._types[type_name]
        except KeyError:
            raise SchemaRegistryError(f"Undeclared type '{type_name}'") from None

    def field(self, type_name: str, field_name: str) -> FieldDescriptor:
        try:
            return self._fields[(type_name, field_name)]
        except KeyError:
            raise SchemaRegistryError(f"Undeclared field '{type_name}.{field_name}'") from None

    def relation_fields(self) -> list[FieldDescriptor]:
        return [d for d in self._fields.values() if d.is_relation and d.owner != ROOT_TYPE]

    def ensure_present(self, descriptor: FieldDescriptor, value: Any, key: object) -> Any:
        """Apply the field's nullability policy to a possibly-absent value."""
        if value is None and not descriptor.nullable:
            raise NotFoundError(descriptor.target or descriptor.owner, key)
        return value

    def check_loaders(self, loader_names: Iterable[str]) -> None:
        """Every loader named by a relation field must exist."""
        available = set(loader_names)
        missing = [
            f"{d.path} -> {d.loader}"
            for d in self.relation_fields()
            if d.loader not in available
        ]
        if missing:
            raise SchemaRegistryError(f"Unknown loaders: {', '.join(missing)}")

    def check_schema(self, schema: GraphQLSchema) -> None:
        """Compare the registry with an executable graphql-core schema, both ways."""
        problems: list[str] = []

        for declaration in self._types.values():
            gql_type = schema.get_type(declaration.name)
            if not isinstance(gql_type, GraphQLObjectType):
                problems.append(f"type '{declaration.name}' missing from schema")
                continue

            declared = {d.name for d in declaration.fields}
            for extra in sorted(set(gql_type.fields) - declared):
                problems.append(f"field '{declaration.name}.{extra}' is not declared")

            for descriptor in declaration.fields:
                gql_field = gql_type.fields.get(descriptor.name)
                if gql_field is None:
                    problems.append(f"field '{descriptor.path}' missing from schema")
                    continue
                problems.extend(_compare_field(descriptor, gql_field.type))

        if problems:
            raise SchemaRegistryError("Schema does not match registry: " + "; ".join(problems))


def _compare_field(descriptor: FieldDescriptor, gql_type: Any) -> list[str]:
    problems = []
    nullable = not is_non_null_type(gql_type)
    inner = get_nullable_type(gql_type)

    if is_list_type(inner):
        kind = FieldKind.LIST
    elif is_object_type(inner):
        kind = FieldKind.OBJECT
    else:
        kind = FieldKind.SCALAR

    if kind is not descriptor.kind:
        problems.append(f"'{descriptor.path}' is {kind.value}, declared {descriptor.kind.value}")
    if nullable != descriptor.nullable:
        problems.append(f"'{descriptor.path}' nullability differs from declaration")
    if descriptor.is_relation and get_named_type(inner).name != descriptor.target:
        problems.append(f"'{descriptor.path}' targets {get_named_type(inner).name}")
    return problems


TYPE_DECLARATIONS = (
    TypeDeclaration(
        name="MemberType",
        collection=Collection.MEMBER_TYPE,
        fields=(
            scalar("id"),
            scalar("discount"),
            scalar("postsLimitPerMonth"),
            many("profiles", "Profile", loader="profiles_by_member_type", foreign_key="id"),
        ),
    ),
    TypeDeclaration(
        name="Post",
        collection=Collection.POST,
        fields=(
            scalar("id"),
            scalar("title"),
            scalar("content"),
            scalar("authorId"),
            one("author", "User", loader="user_by_id", foreign_key="author_id"),
        ),
    ),
    TypeDeclaration(
        name="Profile",
        collection=Collection.PROFILE,
        fields=(
            scalar("id"),
            scalar("isMale"),
            scalar("yearOfBirth"),
            scalar("userId"),
            scalar("memberTypeId"),
            one("user", "User", loader="user_by_id", foreign_key="user_id"),
            one(
                "memberType",
                "MemberType",
                loader="member_type_by_id",
                foreign_key="member_type_id",
            ),
        ),
    ),
    TypeDeclaration(
        name="User",
        collection=Collection.USER,
        fields=(
            scalar("id"),
            scalar("name"),
            scalar("balance"),
            one("profile", "Profile", loader="profile_by_user", foreign_key="id", nullable=True),
            many("posts", "Post", loader="posts_by_author", foreign_key="id"),
            many("userSubscribedTo", "User", loader="subscribed_to_by_user", foreign_key="id"),
            many("subscribedToUser", "User", loader="subscribers_by_user", foreign_key="id"),
        ),
    ),
    TypeDeclaration(
        name=ROOT_TYPE,
        fields=(
            many("memberTypes", "MemberType"),
            many("posts", "Post"),
            many("users", "User"),
            many("profiles", "Profile"),
            one("memberType", "MemberType", nullable=True),
            one("post", "Post", nullable=True),
            one("profile", "Profile", nullable=True),
            one("user", "User", nullable=True),
        ),
    ),
)

# Process-scoped, built exactly once
REGISTRY = SchemaRegistry(TYPE_DECLARATIONS)
