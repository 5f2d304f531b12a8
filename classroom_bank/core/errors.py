"""Error taxonomy shared by every domain package."""


class ClassroomBankError(Exception):
    """Base class for domain errors."""


class NotFoundError(ClassroomBankError):
    """Raised when a profile, account or thread does not exist."""


class ValidationError(ClassroomBankError):
    """Raised when a request carries missing or malformed fields."""


class ConflictError(ClassroomBankError):
    """Raised when an identifier is already taken."""


class InternalError(ClassroomBankError):
    """Raised for storage failures and other unexpected conditions."""


class StoreTimeoutError(InternalError):
    """Raised when a database call exceeds ``database.timeout_seconds``."""
