from fastapi import status
from src.domain.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


# Single place mapping domain error codes onto HTTP
ERROR_STATUS = {
    "TOKEN_REQUIRED": status.HTTP_400_BAD_REQUEST,
    "CODE_REQUIRED": status.HTTP_400_BAD_REQUEST,
    "EMAIL_REQUIRED": status.HTTP_400_BAD_REQUEST,
    "INVALID_EMAIL": status.HTTP_400_BAD_REQUEST,
    "FULL_NAME_REQUIRED": status.HTTP_400_BAD_REQUEST,
    "INVALID_ROLE": status.HTTP_400_BAD_REQUEST,
    "ORGANIZATION_REQUIRED": status.HTTP_400_BAD_REQUEST,
    "ORGANIZATION_NOT_FOUND": status.HTTP_400_BAD_REQUEST,
    "TEAM_NOT_FOUND": status.HTTP_400_BAD_REQUEST,
    "INVALID_STRATEGY": status.HTTP_400_BAD_REQUEST,
    "INVALID_INVITATION": status.HTTP_400_BAD_REQUEST,
    "EMAIL_MISMATCH": status.HTTP_403_FORBIDDEN,
    "INVITATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVITATION_CONFLICT": status.HTTP_409_CONFLICT,
    "ILLEGAL_TRANSITION": status.HTTP_409_CONFLICT,
    "INVITATION_EXPIRED": status.HTTP_410_GONE,
}


def raise_for_error(error: Error):
    """Raise the ClientError/ServerError matching a use case error"""
    status_code = ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
