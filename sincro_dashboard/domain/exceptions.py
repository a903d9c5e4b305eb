"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Submitted data breaks a business rule and must not be persisted"""

    pass


class MissingClientError(ValidationError):
    """Contract submitted without a selected client"""

    pass


class ContractNotEligibleError(DomainException):
    """Contract has not reached Installation Completed and cannot be billed"""

    pass


class ReceivableAlreadyExistsError(DomainException):
    """Contract already has an accounts receivable record"""

    pass


class ReportGenerationError(DomainException):
    """PDF report could not be rendered"""

    pass
