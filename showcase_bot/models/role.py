from enum import Enum


class Role(str, Enum):
    CONTENT_MANAGER = "content_manager"
    ADMIN = "admin"

    @property
    def level(self) -> int:
        return ROLE_LEVELS[self]

    def includes(self, required: "Role") -> bool:
        """Role hierarchy: admin includes content_manager."""
        return self.level >= required.level


ROLE_LEVELS = {
    Role.CONTENT_MANAGER: 1,
    Role.ADMIN: 2,
}
