"""Tests for request logging middleware helpers."""

from socialgraph.middleware import operation_name_from_document, sanitize_query_params


class TestSanitizeQueryParams:
    def test_redacts_sensitive_keys(self):
        params = {"api_key": "abc", "Authorization": "Bearer x", "page": "2"}

        assert sanitize_query_params(params) == {
            "api_key": "[REDACTED]",
            "Authorization": "[REDACTED]",
            "page": "2",
        }

    def test_redacts_graphql_payload(self):
        params = {"query": "{ users { name } }", "variables": "{}", "operationName": "Users"}

        sanitized = sanitize_query_params(params)

        assert sanitized["query"] == "[REDACTED]"
        assert sanitized["variables"] == "[REDACTED]"
        assert sanitized["operationName"] == "Users"


class TestOperationName:
    def test_named_query(self):
        document = "query GetUser($id: UUID!) { user(id: $id) { id } }"

        assert operation_name_from_document(document) == "GetUser"

    def test_anonymous_query(self):
        assert operation_name_from_document("{ users { id } }") == "unnamed_operation"

    def test_introspection(self):
        assert operation_name_from_document("{ __schema { types { name } } }") == "__introspection"

    def test_not_a_document(self):
        assert operation_name_from_document(None) is None
        assert operation_name_from_document("") is None
