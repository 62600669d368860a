"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidAmount(DomainException):
    """Payment or transaction amount outside the allowed range"""

    pass


class MissingReference(DomainException):
    """Client or product id does not resolve to a known record"""

    pass


class InvalidPaymentMethod(DomainException):
    """Payment method is not one the shop accepts"""

    pass


class InsufficientStock(DomainException):
    """Requested quantity exceeds the product's stock"""

    pass


class InvalidRentalState(DomainException):
    """Rental lifecycle transition is not allowed from its current state"""

    pass


class ConcurrentUpdateError(DomainException):
    """Transaction balance changed between validation and write"""

    pass


class TransactionHasPayments(DomainException):
    """Transaction carries paid amounts and is part of the financial history"""

    pass
