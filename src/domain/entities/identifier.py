"""
Identifier Value Object

Stable key correlating one user across stores. Constructed once at the API
boundary and carried opaquely afterwards.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict, EmailStr, TypeAdapter, ValidationError

from .enums import IdentifierKind

_email_adapter = TypeAdapter(EmailStr)

# Largest primary key a signed 64-bit INTEGER column can hold
MAX_USER_ID = 2**63 - 1


class Identifier(BaseModel):
    """
    Tagged identifier: either an email address or a numeric user id.

    ``value`` is always the canonical text form, so two identifiers for the
    same input compare equal however the input was typed (``42``, ``"042"``,
    ``" 42 "``; ``"User@Example.com"`` and ``"user@example.com"``).
    """

    model_config = ConfigDict(frozen=True)

    kind: IdentifierKind
    value: str

    @property
    def is_email(self) -> bool:
        return self.kind == IdentifierKind.email

    @property
    def user_id(self) -> int:
        if self.kind != IdentifierKind.user_id:
            raise ValueError("Identifier is not a numeric user id")
        return int(self.value)

    @classmethod
    def for_user(cls, user_id: int) -> "Identifier":
        return parse_identifier(user_id)

    def __str__(self) -> str:
        return self.value


def parse_identifier(raw: Union[int, str]) -> Identifier:
    """
    Canonicalize a raw identifier.

    Args:
        raw: Numeric user id (int or digit string) or email address

    Returns:
        Identifier in canonical form

    Raises:
        ValueError: if raw is neither a non-negative integer nor a valid email
    """
    # bool is an int subclass; True must not become user 1
    if isinstance(raw, bool):
        raise ValueError("Identifier must be an email address or a numeric user id")

    if isinstance(raw, int):
        if raw < 0:
            raise ValueError("User id must not be negative")
        if raw > MAX_USER_ID:
            raise ValueError("User id is out of range")
        return Identifier(kind=IdentifierKind.user_id, value=str(raw))

    if not isinstance(raw, str):
        raise ValueError("Identifier must be an email address or a numeric user id")

    text = raw.strip()
    if not text:
        raise ValueError("Identifier must not be empty")

    if text.isascii() and text.isdigit():
        return parse_identifier(int(text))

    if "@" in text:
        try:
            email = _email_adapter.validate_python(text)
        except ValidationError as exc:
            raise ValueError("Invalid email address") from exc
        return Identifier(kind=IdentifierKind.email, value=str(email).lower())

    raise ValueError("Identifier must be an email address or a numeric user id")
