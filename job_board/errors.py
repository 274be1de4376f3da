"""Error taxonomy shared by services and request handlers.

Every error carries the HTTP status the web layer answers with and a default
user-facing message. Services raise these; ``web/app.py`` turns them into
``{"error": message}`` JSON responses.
"""


class JobBoardError(Exception):
    status_code = 500
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(JobBoardError):
    """No session, or the session's role is not the one required."""

    status_code = 401
    default_message = "Unauthorized"


class Unauthenticated(Unauthorized):
    default_message = "Not authenticated"


class Forbidden(JobBoardError):
    status_code = 403
    default_message = "You don't have permission to perform this action"


class AccountDeactivated(Forbidden):
    default_message = "This account has been deactivated."


class NotFound(JobBoardError):
    status_code = 404
    default_message = "Not found"


class NotFoundOrForbidden(NotFound):
    """Ownership and existence are checked by one query; the caller can't tell which failed."""

    default_message = "Not found or you don't have permission to access it"


class DuplicateEmail(JobBoardError):
    status_code = 409
    default_message = "Email already in use"


class DuplicateApplication(JobBoardError):
    status_code = 409
    default_message = "You have already applied for this job"


class AlreadySaved(JobBoardError):
    status_code = 409
    default_message = "Job already saved"


class InvalidCredentials(JobBoardError):
    status_code = 401
    default_message = "Invalid email or password"


class RoleMismatch(JobBoardError):
    status_code = 403

    def __init__(self, actual_role: str):
        self.actual_role = actual_role
        super().__init__(
            f"This account is registered as a {actual_role}. "
            f"Please use the {actual_role} login option."
        )


class ValidationError(JobBoardError):
    status_code = 422
    default_message = "Invalid input"


class DatabaseError(JobBoardError):
    status_code = 500
    default_message = "A database error occurred. Please try again."
