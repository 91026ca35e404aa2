from typing import Union

from fastapi import status
from libs.result import Error
from src.api.error import ClientError
from src.domain.entities import Identifier, parse_identifier


def parse_identifier_or_raise(raw: Union[int, str]) -> Identifier:
    """
    Canonicalize an identifier at the HTTP boundary.

    Raises:
        ClientError: 400 VALIDATION_ERROR for malformed identifiers
    """
    try:
        return parse_identifier(raw)
    except ValueError as exc:
        raise ClientError(
            Error("VALIDATION_ERROR", str(exc)), status_code=status.HTTP_400_BAD_REQUEST
        )
