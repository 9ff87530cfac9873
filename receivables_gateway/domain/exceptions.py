"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Amount, count, date or other input is missing or malformed"""

    pass


class PreconditionError(DomainException):
    """Required context for the operation was not supplied"""

    pass


class NotFoundError(DomainException):
    """Referenced debt or installment does not exist for this owner"""

    pass


class StateConflictError(DomainException):
    """Payment conflicts with the current balance of its target"""

    def __init__(self, message: str, remaining_cents: int):
        super().__init__(message)
        self.remaining_cents = remaining_cents
