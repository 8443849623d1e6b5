"""Acting user lookup."""

from sqlalchemy.ext.asyncio import AsyncSession

from statusflow.core.context import ActingUser
from statusflow.db.models.user import User


async def get_acting_user(session: AsyncSession, user_id: int | None) -> ActingUser | None:
    """Resolve a user id to an ActingUser. None for system-triggered changes or unknown ids."""
    if user_id is None:
        return None

    user = await session.get(User, user_id)
    if user is None:
        return None

    return ActingUser(
        user_id=user.id,
        email_address=user.email_address,
        first_name=user.first_name,
        last_name=user.last_name,
    )
