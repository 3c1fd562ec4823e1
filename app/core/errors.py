class FamilyTreeError(Exception):
    """Base class for errors raised by the tree store and graph functions."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FamilyTreeError):
    status_code = 404


class ValidationError(FamilyTreeError):
    status_code = 400


class ConflictError(FamilyTreeError):
    status_code = 409


class EmptyTreeError(FamilyTreeError):
    """No records at all, or a root could not be determined."""

    status_code = 500
