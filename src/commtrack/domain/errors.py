"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidBrokerageError(ValidationError):
    """Brokerage does not resolve to a known fee schedule."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConfigurationError(DomainError):
    """Required setting for an integration is missing."""


class SheetSyncError(DomainError):
    """Spreadsheet backend request failed."""


class ScanError(DomainError):
    """Document scan failed or returned an unusable reply."""


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def unknown_brokerage(value: object) -> str:
    """Return message for a brokerage that matches no fee schedule."""
    return (
        f"Unknown brokerage '{value}'. "
        "Supported brokerages: KW (Keller Williams), BDH (Bennion Deville Homes)"
    )


def unknown_field(name: str) -> str:
    """Return message for a field name that is not part of a transaction."""
    return f"Unknown transaction field '{name}'"


def missing_setting(env_var: str, purpose: str) -> str:
    """Return message for a missing integration setting."""
    return f"{env_var} is not set; it is required to {purpose}"
