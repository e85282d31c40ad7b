"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidArgumentError(DomainException):
    """Caller passed a contractually malformed input"""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class PaymentExceedsBalanceError(InvalidArgumentError):
    """Payment amount is larger than the loan's outstanding balance"""

    pass
