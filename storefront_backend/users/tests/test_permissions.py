from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase
from rest_framework.test import APIRequestFactory

from users.permissions import IsAdmin, IsAdminOrReadOnly, IsCustomer, IsOwnerOrAdmin

User = get_user_model()


class _OwnedRecord:
    def __init__(self, user_id):
        self.user_id = user_id


class PermissionRoleTests(TestCase):
    """
    Tests for role-based permissions.

    GUARANTEES:
    - Correct role access
    - No privilege escalation
    - Anonymous users denied writes everywhere
    """

    def setUp(self):
        self.factory = APIRequestFactory()

        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass12345",
            role="admin",
        )
        self.customer = User.objects.create_user(
            email="customer@example.com",
            password="pass12345",
        )
        self.other = User.objects.create_user(
            email="other@example.com",
            password="pass12345",
        )

    # --------------------------------------------------
    # Helpers
    # --------------------------------------------------

    def _request_for(self, user=None, method="get"):
        request = getattr(self.factory, method)("/")
        request.user = user or AnonymousUser()
        return request

    # --------------------------------------------------
    # Roles
    # --------------------------------------------------

    def test_new_users_default_to_customer(self):
        self.assertEqual(self.customer.role, "customer")
        self.assertFalse(self.customer.is_admin)

    def test_is_admin(self):
        perm = IsAdmin()
        self.assertTrue(perm.has_permission(self._request_for(self.admin), None))
        self.assertFalse(perm.has_permission(self._request_for(self.customer), None))
        self.assertFalse(perm.has_permission(self._request_for(), None))

    def test_is_customer(self):
        perm = IsCustomer()
        self.assertTrue(perm.has_permission(self._request_for(self.customer), None))
        self.assertFalse(perm.has_permission(self._request_for(self.admin), None))

    def test_admin_or_read_only(self):
        perm = IsAdminOrReadOnly()
        self.assertTrue(perm.has_permission(self._request_for(), None))
        self.assertFalse(perm.has_permission(self._request_for(method="post"), None))
        self.assertFalse(
            perm.has_permission(self._request_for(self.customer, method="post"), None)
        )
        self.assertTrue(
            perm.has_permission(self._request_for(self.admin, method="post"), None)
        )

    # --------------------------------------------------
    # Ownership
    # --------------------------------------------------

    def test_owner_or_admin(self):
        perm = IsOwnerOrAdmin()
        record = _OwnedRecord(self.customer.id)

        self.assertTrue(perm.has_object_permission(self._request_for(self.customer), None, record))
        self.assertTrue(perm.has_object_permission(self._request_for(self.admin), None, record))
        self.assertFalse(perm.has_object_permission(self._request_for(self.other), None, record))
        self.assertFalse(perm.has_object_permission(self._request_for(), None, record))
