"""
Exceptions raised by tegen.
"""

from typing import Any, Dict, Optional


class TegenException(Exception):
    """
    Base exception for tegen errors.

    Carries a machine-readable code next to the human-readable message so the
    install boundary can report both.
    """

    default_code = "TEGEN_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class PreconditionMissing(TegenException):
    """Raised when no manifest exists at the project root."""

    default_code = "PRECONDITION_MISSING"


class AlreadyInstalled(TegenException):
    """
    Not a failure. Describes the no-op outcome of installing a package that
    the manifest already records.
    """

    default_code = "ALREADY_INSTALLED"


class AcquisitionFailed(TegenException):
    """Raised when a clone, fetch, checkout or pull exits non-zero."""

    default_code = "ACQUISITION_FAILED"


class IntegrationFailed(TegenException):
    """Raised when copying headers or libraries into the project fails."""

    default_code = "INTEGRATION_FAILED"


class BuildDescriptorUpdateFailed(IntegrationFailed):
    """Raised when appending to the build descriptor fails."""

    default_code = "BUILD_DESCRIPTOR_FAILED"


class ManifestReadFailed(TegenException):
    """Raised when the manifest exists but cannot be parsed."""

    default_code = "MANIFEST_READ_FAILED"


class ManifestWriteFailed(TegenException):
    """Raised when the manifest cannot be serialized or written."""

    default_code = "MANIFEST_WRITE_FAILED"


class CommandFailed(TegenException):
    """Raised when an external build or run command exits non-zero."""

    default_code = "COMMAND_FAILED"


class ConfigurationError(TegenException):
    """Raised when tegen.toml is malformed."""

    default_code = "CONFIGURATION_ERROR"
