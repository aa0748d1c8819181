"""
Infrastructure Exceptions

Infrastructure layer errors.
"""


class InfrastructureException(Exception):
    """Base infrastructure error."""
    pass


class DatabaseError(InfrastructureException):
    """Storage backend failure."""
    pass
