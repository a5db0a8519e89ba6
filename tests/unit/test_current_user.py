"""
Name: Current User Service Tests

Responsibilities:
  - Acting user resolved from the request/job context
  - Nil UUID fallback when missing or malformed
"""

from uuid import uuid4

import pytest

from catalog.context import set_request_context
from catalog.domain.audit import NIL_USER_ID
from catalog.identity.current_user import CurrentUserService

pytestmark = pytest.mark.unit


def test_returns_acting_user_from_context():
    user_id = uuid4()
    set_request_context(acting_user_id=str(user_id))

    assert CurrentUserService().get_user_id_or_default() == user_id


@pytest.mark.parametrize("raw", ["", "   ", "not-a-uuid"])
def test_falls_back_to_nil_uuid(raw):
    set_request_context(acting_user_id=raw)

    assert CurrentUserService().get_user_id_or_default() == NIL_USER_ID
