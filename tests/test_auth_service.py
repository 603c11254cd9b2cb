from unittest.mock import Mock

from conftest import ADMIN_ID, MANAGER_ID, STRANGER_ID

from showcase_bot.models.role import Role
from showcase_bot.services.auth_service import RoleTable, parse_adduser_command
from showcase_bot.services.store import DocumentStore, StoreError


class TestRoleHierarchy:
    def test_admin_includes_content_manager(self):
        assert Role.ADMIN.includes(Role.CONTENT_MANAGER)

    def test_content_manager_does_not_include_admin(self):
        assert not Role.CONTENT_MANAGER.includes(Role.ADMIN)


class TestRoleTable:
    def test_seeded_from_settings(self, test_settings):
        roles = RoleTable.from_settings(test_settings)
        assert len(roles) == 2
        assert roles.get_user_role(ADMIN_ID) == Role.ADMIN
        assert roles.get_user_role(str(MANAGER_ID)) == Role.CONTENT_MANAGER

    def test_unknown_user_not_authorized(self, test_settings):
        roles = RoleTable.from_settings(test_settings)
        assert not roles.is_authorized(STRANGER_ID)
        assert roles.get_user_role(STRANGER_ID) is None
        assert not roles.has_permission(STRANGER_ID, Role.CONTENT_MANAGER)

    def test_has_permission(self, test_settings):
        roles = RoleTable.from_settings(test_settings)
        assert roles.has_permission(ADMIN_ID, Role.ADMIN)
        assert roles.has_permission(ADMIN_ID, "content_manager")
        assert roles.has_permission(MANAGER_ID, Role.CONTENT_MANAGER)
        assert not roles.has_permission(MANAGER_ID, Role.ADMIN)

    def test_unknown_required_role_denies(self, test_settings):
        roles = RoleTable.from_settings(test_settings)
        assert roles.has_permission(ADMIN_ID, "superuser") is False

    def test_load_merges_durable_users_and_skips_malformed(self, store):
        store.set("authorized_users", "300", {"userId": "300", "role": "content_manager", "addedBy": 100})
        store.set("authorized_users", "301", {"userId": "301", "role": "owner"})
        roles = RoleTable({"100": Role.ADMIN})

        loaded = roles.load(store)

        assert loaded == 1
        assert roles.get_user_role(300) == Role.CONTENT_MANAGER
        assert not roles.is_authorized(301)

    def test_load_keeps_seed_when_store_unreachable(self):
        store = Mock(spec=DocumentStore)
        store.name = "broken"
        store.list.side_effect = StoreError("down")
        roles = RoleTable({"100": Role.ADMIN})

        assert roles.load(store) == 0
        assert roles.is_authorized(100)


class TestAddUser:
    def test_admin_adds_user(self, test_settings, store):
        roles = RoleTable.from_settings(test_settings)

        result = roles.add_user(store, ADMIN_ID, "555", Role.CONTENT_MANAGER)

        assert result.ok
        assert roles.get_user_role(555) == Role.CONTENT_MANAGER
        doc = store.get("authorized_users", "555")
        assert doc["userId"] == "555"
        assert doc["role"] == "content_manager"
        assert doc["addedBy"] == str(ADMIN_ID)
        assert "addedAt" in doc

    def test_content_manager_cannot_add(self, test_settings, store):
        roles = RoleTable.from_settings(test_settings)

        result = roles.add_user(store, MANAGER_ID, "555", Role.ADMIN)

        assert not result.ok
        assert result.error_code == "permission_denied"
        assert not roles.is_authorized(555)
        assert store.get("authorized_users", "555") is None

    def test_store_failure_leaves_table_unchanged(self, test_settings):
        store = Mock(spec=DocumentStore)
        store.set.side_effect = StoreError("write failed")
        roles = RoleTable.from_settings(test_settings)

        result = roles.add_user(store, ADMIN_ID, "555", Role.CONTENT_MANAGER)

        assert not result.ok
        assert result.error_code == "store_error"
        assert not roles.is_authorized(555)

    def test_added_user_survives_reload(self, test_settings, store):
        RoleTable.from_settings(test_settings).add_user(store, ADMIN_ID, "555", Role.ADMIN)

        fresh = RoleTable.from_settings(test_settings)
        fresh.load(store)

        assert fresh.get_user_role(555) == Role.ADMIN


class TestParseAdduserCommand:
    def test_plain_form(self):
        result = parse_adduser_command("adduser 123456789 content_manager")
        assert result.ok
        assert result.value == ("123456789", Role.CONTENT_MANAGER)

    def test_slash_form(self):
        result = parse_adduser_command("/adduser 42 admin")
        assert result.value == ("42", Role.ADMIN)

    def test_wrong_arity(self):
        result = parse_adduser_command("adduser 42")
        assert result.error_code == "invalid_format"

    def test_unknown_role(self):
        result = parse_adduser_command("adduser 42 owner")
        assert result.error_code == "invalid_role"
