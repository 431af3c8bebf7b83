from uuid import UUID

from pydantic import BaseModel


class CurrentUser(BaseModel):
    id: UUID
    name: str | None = None
    permissions: list[str] = []

    def can(self, permission: str) -> bool:
        return permission in self.permissions
