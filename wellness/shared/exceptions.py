from fastapi import HTTPException, status


class CredentialsException(HTTPException):
    """Caller could not be authenticated."""

    def __init__(self, detail: str = "Unauthorized. Please sign in."):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenException(HTTPException):
    """Caller is authenticated but lacks the required role."""

    def __init__(self, detail: str = "You do not have permission to perform this action"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class NotFoundException(HTTPException):
    """Exception for resource not found."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class BadRequestException(HTTPException):
    """Exception for bad request."""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class InvalidIdentifierException(BadRequestException):
    """Identifier is not a well-formed ObjectId."""

    def __init__(self, resource: str):
        super().__init__(f"Invalid {resource} ID format")


class ConflictException(HTTPException):
    """Exception for resource conflict."""

    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )


class InvalidTransitionException(ConflictException):
    """Visit status change not allowed from the current status."""

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change visit status from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class StorageException(HTTPException):
    """File storage is misconfigured or rejected the operation."""

    def __init__(self, detail: str = "File storage operation failed"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )
