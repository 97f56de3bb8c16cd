class ShowcaseError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


# Missing or malformed input, raised before any network call where possible
class ValidationError(ShowcaseError):
    status_code = 422


# A well-formed request that the current state does not allow
class TransitionRejected(ValidationError):
    status_code = 409


class Unauthorized(ShowcaseError):
    status_code = 403


class NotFound(ShowcaseError):
    status_code = 404


class TransientIOError(ShowcaseError):
    status_code = 503
