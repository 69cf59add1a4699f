"""Error kinds raised by the lending rules and the service layer."""

NOT_FOUND_MESSAGE = "The object was not found"
WRONG_PARAMETERS_MESSAGE = "The parameters are wrong"


class LendingRuleError(ValueError):
    """A rule was called with a record in an invalid state."""


class NotFoundError(LookupError):
    """A referenced book or user does not exist."""

    def __init__(self, message: str = NOT_FOUND_MESSAGE):
        super().__init__(message)


class InvalidParametersError(RuntimeError):
    """The payload of an update request is not acceptable."""

    def __init__(self, message: str = WRONG_PARAMETERS_MESSAGE):
        super().__init__(message)
