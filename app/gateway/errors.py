"""Error taxonomy for the description pipeline.

CallerError subclasses are detected before any network call and map to 400.
UpstreamError subclasses map to a uniform 500; their ``detail`` is for
server-side logs only and never reaches the response body.
"""

from __future__ import annotations

GENERIC_ERROR_MESSAGE = "Error generating description"


class DescriptionError(Exception):
    """Base class for every failure of a description request."""

    status_code: int = 500
    public_message: str = GENERIC_ERROR_MESSAGE

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.public_message)
        self.detail = detail or self.public_message


class CallerError(DescriptionError):
    status_code = 400


class MissingImageReference(CallerError):
    public_message = "Image URL is required"


class MissingCredential(CallerError):
    public_message = "API key is required"


class UnknownModelIdentifier(CallerError):
    public_message = "Unknown model"

    def __init__(self, model: str):
        super().__init__(f"Unknown model identifier: {model}")
        self.model = model
        self.public_message = f"Unknown model: {model}"


class UpstreamError(DescriptionError):
    status_code = 500
    public_message = GENERIC_ERROR_MESSAGE


class ImageDownloadFailed(UpstreamError):
    def __init__(self, detail: str, status_code: int = 0):
        super().__init__(detail)
        self.upstream_status = status_code


class ProviderCallFailed(UpstreamError):
    def __init__(self, detail: str, status_code: int = 0, error_code: str = ""):
        super().__init__(detail)
        self.upstream_status = status_code
        self.error_code = error_code


class MalformedProviderOutput(UpstreamError):
    """The provider reply did not follow the ALT TEXT / LONG DESCRIPTION format."""
