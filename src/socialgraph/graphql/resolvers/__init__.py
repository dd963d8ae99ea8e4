"""Resolver package for the GraphQL schema.

Root field resolvers live in ``query`` and ``user``; relation fields on
already-resolved parents go through ``relations``.
"""

# Intentionally empty; functions are defined in sibling modules.
