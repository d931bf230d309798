"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class DataSourceError(DomainException):
    """Remote CSV source returned an error or is unavailable"""

    pass


class EmptyPortfolioError(DomainException):
    """CSV text contained no client rows"""

    pass


class PortfolioNotFoundError(DomainException):
    """No parsed portfolio exists for the given id"""

    pass
