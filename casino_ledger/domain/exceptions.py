"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    code = "domain_error"


class NotFoundError(DomainException):
    """Unknown user or loan"""

    code = "not_found"


class InvalidArgumentError(DomainException):
    """Bad symbol, non-positive amount, unsupported game or loan type"""

    code = "invalid_argument"


class InsufficientFundsError(DomainException):
    """Operation would take the balance below zero"""

    code = "insufficient_funds"


class InsufficientSharesError(DomainException):
    """Sell order exceeds the aggregate holding for the symbol"""

    code = "insufficient_shares"


class OverpaymentRejectedError(DomainException):
    """Repayment exceeds the amount remaining on the loan"""

    code = "overpayment_rejected"


class TransientError(DomainException):
    """Storage or price oracle unavailable; safe for the caller to retry"""

    code = "transient"
