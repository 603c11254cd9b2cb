import threading
from typing import Optional, Tuple

from showcase_bot.config import Settings
from showcase_bot.logging_config import get_logger
from showcase_bot.models.authorized_user import COLLECTION, AuthorizedUser
from showcase_bot.models.role import Role
from showcase_bot.services.result import ErrorCode, Result
from showcase_bot.services.store import DocumentStore, StoreDocumentError

logger = get_logger("auth_service")

ADDUSER_COMMANDS = ("adduser", "/adduser")


class RoleTable:
    """In-memory role table: seeded from configuration, read-through/write-through to the store."""

    def __init__(self, seed: Optional[dict] = None):
        self._roles: dict[str, Role] = {str(k): Role(v) for k, v in (seed or {}).items()}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RoleTable":
        seed = {}
        if settings.content_manager_user_id:
            seed[settings.content_manager_user_id] = Role.CONTENT_MANAGER
        if settings.admin_user_id:
            seed[settings.admin_user_id] = Role.ADMIN
        return cls(seed)

    def __len__(self) -> int:
        return len(self._roles)

    def load(self, store: DocumentStore) -> int:
        """Merge durable users into the table. Seed users stay if the store is unreachable."""
        try:
            docs = store.list(COLLECTION)
        except Exception as e:
            logger.error(f"Error loading authorized users: {e}", extra={"context": {"store": store.name}})
            return 0

        loaded = 0
        with self._lock:
            for doc_id, data in docs:
                try:
                    user = AuthorizedUser.from_document(doc_id, data)
                except StoreDocumentError as e:
                    logger.warning(f"Skipping authorized user: {e}")
                    continue
                self._roles[user.user_id] = user.role
                loaded += 1

        logger.info(f"Loaded {loaded} authorized users from {store.name}")
        return loaded

    def is_authorized(self, user_id) -> bool:
        return str(user_id) in self._roles

    def get_user_role(self, user_id) -> Optional[Role]:
        return self._roles.get(str(user_id))

    def has_permission(self, user_id, required_role) -> bool:
        role = self.get_user_role(user_id)
        if role is None:
            return False
        try:
            required = Role(required_role)
        except ValueError:
            logger.warning(f"Unknown role in permission check: {required_role!r}")
            return False
        return role.includes(required)

    def add_user(self, store: DocumentStore, requester_id, new_user_id: str, role: Role) -> Result[AuthorizedUser]:
        """Admin-only. Persists first, then updates the in-memory table."""
        if not self.has_permission(requester_id, Role.ADMIN):
            return Result.failure("Only admins can add users.", ErrorCode.PERMISSION_DENIED)

        user = AuthorizedUser(user_id=str(new_user_id), role=role, added_by=str(requester_id))
        try:
            store.set(
                COLLECTION,
                user.user_id,
                {
                    "userId": user.user_id,
                    "role": user.role.value,
                    "addedBy": user.added_by,
                    "addedAt": store.timestamp(),
                },
            )
        except Exception as e:
            logger.error(f"Error saving authorized user {user.user_id}: {e}", exc_info=True)
            return Result.from_exception(e, ErrorCode.STORE_ERROR)

        with self._lock:
            self._roles[user.user_id] = role

        logger.info(
            "Authorized user added",
            extra={"context": {"user_id": user.user_id, "role": role.value, "added_by": user.added_by}},
        )
        return Result.success(user)


def parse_adduser_command(text: str) -> Result[Tuple[str, Role]]:
    """Parse `adduser USER_ID ROLE` (leading slash optional)."""
    parts = text.split()
    if len(parts) != 3 or parts[0] not in ADDUSER_COMMANDS:
        return Result.failure("Invalid format. Use: adduser USER_ID ROLE", ErrorCode.INVALID_FORMAT)

    _, user_id, role_name = parts
    try:
        role = Role(role_name)
    except ValueError:
        return Result.failure("Invalid role. Use: content_manager or admin", ErrorCode.INVALID_ROLE)
    return Result.success((user_id, role))
