class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable ``kind`` and the HTTP status the API maps it to.
    """

    kind = "domain_error"
    http_status = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__ or self.kind)
        self.message = str(self)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class DuplicateError(DomainError):
    """Raised when a uniqueness constraint would be violated."""

    kind = "duplicate"


class DuplicateEmail(DuplicateError):
    """User already exists with this email"""

    kind = "duplicate_email"


class DuplicateStudentId(DuplicateError):
    """Student ID already exists"""

    kind = "duplicate_student_id"


class DuplicateAttendance(DuplicateError):
    """Attendance already marked for this date"""

    kind = "duplicate_attendance"


class NotFound(DomainError):
    """Referenced entity does not exist"""

    kind = "not_found"
    http_status = 404


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    kind = "authentication_error"
    http_status = 401


class InvalidCredentials(AuthenticationError):
    """Invalid email or password"""

    kind = "invalid_credentials"


class AccountInactive(AuthenticationError):
    """Account is inactive. Please contact administrator"""

    kind = "account_inactive"
    http_status = 403


class Unauthorized(AuthenticationError):
    """Please log in to continue"""

    kind = "unauthorized"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "authorization_error"
    http_status = 403


class Forbidden(AuthorizationError):
    """You do not have permission to perform this action"""

    kind = "forbidden"


class StorageError(DomainError):
    """Raised when the backing store cannot serve a request."""

    kind = "storage_error"
    http_status = 503


class StorageUnavailable(StorageError):
    """Storage is currently unavailable"""

    kind = "unavailable"


class StorageTimeout(StorageError):
    """Storage did not respond in time"""

    kind = "timeout"
    http_status = 504
