"""
Identity Resolution

Maps a boundary Identifier onto the single key that OTP and reset-token
records are stored under: the user's numeric primary key in canonical text.
Email and numeric forms of the same user therefore share one record.
"""

from typing import Optional

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Identifier, IdentifierKind


async def resolve_record_identifier(
    uow: UnitOfWork, identifier: Identifier
) -> Optional[Identifier]:
    """
    Resolve the record identifier for a user.

    Numeric identifiers are already canonical and need no lookup: records are
    only ever written for existing users, so an unknown id simply finds none.

    Returns:
        Identifier of kind user_id, or None when no user has that email
    """
    if identifier.kind == IdentifierKind.user_id:
        return identifier

    user = await uow.users.get_by_email(identifier.value)
    if user is None:
        return None
    return Identifier.for_user(user.id)
