"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class StaActionError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(StaActionError):
    """Raised for missing or invalid action inputs."""


class DownloadError(StaActionError):
    """Raised when the import zip cannot be downloaded or is not a valid archive."""


class ExtractionError(StaActionError):
    """Raised when an archive entry cannot be read or written during extraction."""


class ManifestNotFound(StaActionError):
    """
    Raised when the content package has no readable filter manifest.

    The import pipeline treats this as a soft failure: it is logged and the
    content path output is left unset.
    """


class UnsupportedMountpointError(StaActionError):
    """Raised for mountpoints whose backing store cannot be uploaded to."""


class MountpointFormatError(StaActionError):
    """Raised when a supported mountpoint URL is missing required parts."""


class TokenFetchError(StaActionError):
    """Raised when the credentials file is unusable or the token exchange fails."""


class UploadError(StaActionError):
    """Raised when the aem-import-helper process exits with a non-zero status."""
