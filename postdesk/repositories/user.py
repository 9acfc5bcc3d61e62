"""User repository (read side of the authentication service's table)."""

from postdesk.models import UserDB
from postdesk.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserDB]):
    """Looks up the users behind tokens, posts and comments."""

    model = UserDB
    id_field = "uuid"
    label = "User"

    async def get_by_username(self, username: str) -> UserDB | None:
        return await self.get_by_field("username", username)
