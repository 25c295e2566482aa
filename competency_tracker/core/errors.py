"""Error taxonomy raised by services and converted to JSON at the route boundary."""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(AppError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(AuthError):
    status_code = 403
    default_message = "Admin privileges required"


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class BadRequestError(ValidationError):
    pass


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Already exists"


class InternalError(AppError):
    pass
