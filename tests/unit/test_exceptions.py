"""
Name: Internal Error Tests

Responsibilities:
  - CatalogError carries a stable code and a correlatable error id
"""

import pytest

from catalog.crosscutting.exceptions import CatalogError, DatabaseError

pytestmark = pytest.mark.unit


def test_database_error_response_shape():
    cause = TimeoutError("statement timeout")
    error = DatabaseError("Failed to record audit event", original_error=cause)

    response = error.to_response().to_dict()

    assert response["error_code"] == "DATABASE_ERROR"
    assert response["message"] == "Failed to record audit event"
    assert response["error_id"] == error.error_id
    assert error.original_error is cause
    assert isinstance(error, CatalogError)


def test_error_ids_are_unique_unless_given():
    assert DatabaseError("a").error_id != DatabaseError("a").error_id
    assert DatabaseError("a", error_id="fixed").error_id == "fixed"
