"""
Tests for IdentityService.

Test Classes:
    TestGetUser: id -> Customer | Admin variant
    TestRequireRole: Role and active-account narrowing
"""

import pytest

from authentication.services import Admin, Customer, IdentityService
from authentication.tests.factories import AdminFactory, CustomerFactory
from core.exceptions import AccessDeniedError, NotFoundError


@pytest.mark.django_db
class TestGetUser:
    """
    Verifies:
    - Each role resolves to its own frozen variant
    - Unknown ids raise NotFoundError
    """

    def test_customer_variant(self):
        user = CustomerFactory(display_name="Casey")

        identity = IdentityService.get_user(user.id)

        assert identity == Customer(id=user.id, display_name="Casey", active=True)

    def test_admin_variant(self):
        user = AdminFactory()

        assert isinstance(IdentityService.get_user(user.id), Admin)

    def test_unknown_user(self):
        with pytest.raises(NotFoundError) as exc_info:
            IdentityService.get_user(987654)

        assert exc_info.value.error_code == "USER_NOT_FOUND"


@pytest.mark.django_db
class TestRequireRole:
    """
    Verifies:
    - require_customer rejects admins and inactive customers
    - require_admin rejects customers and inactive admins
    """

    def test_require_customer_accepts_customer(self):
        user = CustomerFactory()

        assert IdentityService.require_customer(user.id).id == user.id

    def test_require_customer_rejects_admin(self):
        with pytest.raises(AccessDeniedError) as exc_info:
            IdentityService.require_customer(AdminFactory().id)

        assert exc_info.value.error_code == "CUSTOMER_REQUIRED"

    def test_require_admin_rejects_customer(self):
        with pytest.raises(AccessDeniedError) as exc_info:
            IdentityService.require_admin(CustomerFactory().id)

        assert exc_info.value.error_code == "ADMIN_REQUIRED"

    def test_inactive_account_is_rejected(self):
        """
        A deactivated admin cannot take rooms.

        Why it matters: offboarded agents keep their rows for history but
        must lose the ability to act on customer chats.
        """
        agent = AdminFactory(is_active=False)

        with pytest.raises(AccessDeniedError) as exc_info:
            IdentityService.require_admin(agent.id)

        assert exc_info.value.error_code == "ACCOUNT_INACTIVE"

    def test_unknown_id_is_not_found(self):
        with pytest.raises(NotFoundError):
            IdentityService.require_admin(987654)


@pytest.mark.django_db
def test_display_name_for():
    user = CustomerFactory(display_name="Casey")

    assert IdentityService.display_name_for(user.id) == "Casey"
    assert IdentityService.display_name_for(None) == ""
    assert IdentityService.display_name_for(987654) == ""
