class ComplianceError(Exception):
    """Base exception for compliance orchestration errors."""


class MissingTenantError(ComplianceError):
    """Raised when an operation is invoked without a tenant code."""


class ApplicationNotFoundError(ComplianceError):
    """Raised when a participant has no application in the tenant."""


class ComplianceDocumentNotFoundError(ComplianceError):
    """Raised when no compliance document matches the requested ID or composite key."""


class InvalidComplianceDataError(ComplianceError):
    """Raised when updated documents contain values the store cannot hold."""
