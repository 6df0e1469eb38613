"""
Tests for the User model.
"""

import pytest

from authentication.tests.factories import AdminFactory, CustomerFactory


@pytest.mark.django_db
class TestUserNames:
    """
    Verifies:
    - display_name is preferred when set
    - The email local part is the fallback short name
    """

    def test_short_name_uses_display_name(self):
        assert CustomerFactory(display_name="Casey").get_short_name() == "Casey"

    def test_short_name_falls_back_to_email(self):
        user = CustomerFactory(email="sam.lee@example.com", display_name="")

        assert user.get_short_name() == "sam.lee"
        assert user.get_full_name() == "sam.lee@example.com"


@pytest.mark.django_db
def test_role_predicates():
    assert CustomerFactory().is_customer
    assert not CustomerFactory().is_support_admin
    assert AdminFactory().is_support_admin
