"""
Tests for the schema registry.
"""

import pytest

from socialgraph.graphql.errors import NotFoundError, SchemaRegistryError
from socialgraph.graphql.loaders import BATCH_LOADERS
from socialgraph.graphql.registry import (
    REGISTRY,
    ROOT_TYPE,
    FieldKind,
    SchemaRegistry,
    TypeDeclaration,
    many,
    one,
    scalar,
)
from socialgraph.graphql.schema import schema, validate_schema
from socialgraph.store.base import Collection


def _root(*fields):
    return TypeDeclaration(name=ROOT_TYPE, fields=fields)


class TestRegistryLookup:
    def test_field_descriptor(self):
        descriptor = REGISTRY.field("User", "userSubscribedTo")

        assert descriptor.kind is FieldKind.LIST
        assert descriptor.target == "User"
        assert descriptor.loader == "subscribed_to_by_user"
        assert descriptor.foreign_key == "id"
        assert descriptor.path == "User.userSubscribedTo"

    def test_nullable_profile(self):
        assert REGISTRY.field("User", "profile").nullable is True
        assert REGISTRY.field("Profile", "memberType").nullable is False

    def test_unknown_field(self):
        with pytest.raises(SchemaRegistryError, match="Undeclared field 'User.email'"):
            REGISTRY.field("User", "email")

    def test_unknown_type(self):
        with pytest.raises(SchemaRegistryError):
            REGISTRY.type("Comment")

    def test_types_are_read_only(self):
        with pytest.raises(TypeError):
            REGISTRY.types["Comment"] = None  # type: ignore[index]

    def test_relation_fields_exclude_root(self):
        owners = {d.owner for d in REGISTRY.relation_fields()}

        assert ROOT_TYPE not in owners
        assert owners == {"MemberType", "Post", "Profile", "User"}


class TestEnsurePresent:
    def test_nullable_absent_is_none(self):
        assert REGISTRY.ensure_present(REGISTRY.field(ROOT_TYPE, "post"), None, "x") is None

    def test_non_null_absent_raises(self):
        with pytest.raises(NotFoundError) as exc_info:
            REGISTRY.ensure_present(REGISTRY.field("Post", "author"), None, "x")

        assert exc_info.value.extensions == {"code": "NOT_FOUND"}

    def test_present_value_passes_through(self):
        assert REGISTRY.ensure_present(REGISTRY.field("Post", "author"), "value", "x") == "value"


class TestRegistryConstruction:
    def test_duplicate_type(self):
        declaration = TypeDeclaration(name="Thing", fields=(), collection=Collection.USER)

        with pytest.raises(SchemaRegistryError, match="declared twice"):
            SchemaRegistry([declaration, declaration, _root()])

    def test_duplicate_field(self):
        declaration = TypeDeclaration(
            name="Thing", fields=(scalar("id"), scalar("id")), collection=Collection.USER
        )

        with pytest.raises(SchemaRegistryError, match="'Thing.id' declared twice"):
            SchemaRegistry([declaration, _root()])

    def test_missing_root(self):
        with pytest.raises(SchemaRegistryError, match="Root type"):
            SchemaRegistry([TypeDeclaration(name="Thing", fields=(), collection=Collection.USER)])

    def test_type_without_collection(self):
        with pytest.raises(SchemaRegistryError, match="has no collection"):
            SchemaRegistry([TypeDeclaration(name="Thing", fields=()), _root()])

    def test_undeclared_target(self):
        with pytest.raises(SchemaRegistryError, match="undeclared type 'Missing'"):
            SchemaRegistry([_root(many("things", "Missing"))])

    def test_relation_needs_loader(self):
        declaration = TypeDeclaration(
            name="Thing", fields=(one("parent", "Thing"),), collection=Collection.USER
        )

        with pytest.raises(SchemaRegistryError, match="needs a loader"):
            SchemaRegistry([declaration, _root()])


class TestStartupChecks:
    def test_registry_matches_schema(self):
        REGISTRY.check_schema(schema._schema)

    def test_registry_loaders_exist(self):
        REGISTRY.check_loaders(BATCH_LOADERS)

    def test_unknown_loader_is_reported(self):
        declaration = TypeDeclaration(
            name="User",
            fields=(many("friends", "User", loader="friends_by_user", foreign_key="id"),),
            collection=Collection.USER,
        )
        registry = SchemaRegistry([declaration, _root()])

        with pytest.raises(SchemaRegistryError, match="User.friends -> friends_by_user"):
            registry.check_loaders(BATCH_LOADERS)

    def test_schema_mismatch_is_reported(self):
        declaration = TypeDeclaration(
            name="Post", fields=(scalar("id"), scalar("title")), collection=Collection.POST
        )
        registry = SchemaRegistry([declaration, _root()])

        with pytest.raises(SchemaRegistryError) as exc_info:
            registry.check_schema(schema._schema)

        message = str(exc_info.value)
        assert "field 'Post.content' is not declared" in message
        assert "field 'Query.users' is not declared" in message

    def test_validate_schema(self):
        validate_schema()

    def test_validate_schema_rejects_bad_registry(self):
        registry = SchemaRegistry([_root()])

        with pytest.raises(SchemaRegistryError):
            validate_schema(registry)
