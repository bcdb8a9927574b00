"""
Tests for the role -> device action matrix.
"""
import pytest

from home_energy.core.exceptions import PermissionDeniedError
from home_energy.core.permissions import DeviceAction, Role, ensure_permission, has_permission


class TestRolePermissions:

    def test_owner_can_do_everything(self):
        assert all(has_permission("OWNER", action) for action in DeviceAction)

    def test_family_member_can_view_and_toggle(self):
        assert has_permission(Role.FAMILY_MEMBER, DeviceAction.VIEW)
        assert has_permission(Role.FAMILY_MEMBER, DeviceAction.TOGGLE)
        for action in (DeviceAction.ADD, DeviceAction.UPDATE, DeviceAction.DELETE):
            assert not has_permission(Role.FAMILY_MEMBER, action)

    def test_guest_can_only_view(self):
        allowed = [action for action in DeviceAction if has_permission("GUEST", action)]
        assert allowed == [DeviceAction.VIEW]

    @pytest.mark.parametrize("role", ["owner", "ADMIN", "", None])
    def test_unknown_roles_get_nothing(self, role):
        assert not has_permission(role, DeviceAction.VIEW)

    def test_ensure_permission_raises(self):
        with pytest.raises(PermissionDeniedError, match="cannot toggle devices"):
            ensure_permission("GUEST", DeviceAction.TOGGLE)

    def test_ensure_permission_passes(self):
        ensure_permission("OWNER", DeviceAction.DELETE)
