"""
Errors raised while building or executing the GraphQL layer
"""


class SchemaRegistryError(Exception):
    """The schema registry or its bindings are inconsistent. Fatal at startup."""

    pass


class NotFoundError(Exception):
    """A non-null field's by-id lookup found no row."""

    code = "NOT_FOUND"

    def __init__(self, type_name: str, key: object):
        super().__init__(f"{type_name} '{key}' not found")
        self.type_name = type_name
        self.key = key
        self.extensions = {"code": self.code}
