"""
Exception classes for OBS Python SDK
"""

from typing import Optional, Dict, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .xml_errors import ErrorResponse


class OBSError(Exception):
    """Base exception for all OBS SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class InvalidConfigurationError(OBSError):
    """Exception raised when the client configuration is invalid"""

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Invalid Configuration: {reason}", "INVALID_CONFIGURATION", details)
        self.reason = reason


class SignatureGenerationError(OBSError):
    """Exception raised when the request signature cannot be computed"""

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Signature Generation Failed: {reason}", "SIGNATURE_GENERATION_FAILED", details)
        self.reason = reason


class InvalidTargetError(OBSError):
    """Exception raised when the request URL cannot be built or decomposed"""

    def __init__(self, url: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Invalid URL: {url}", "INVALID_URL", details)
        self.url = url


class FileAccessError(OBSError):
    """Exception raised when a local file cannot be read"""

    def __init__(self, path: str, underlying_error: BaseException):
        super().__init__(
            f"Failed to access file at path '{path}': {underlying_error}",
            "FILE_ACCESS_ERROR",
            {"path": path},
        )
        self.path = path
        self.underlying_error = underlying_error


class NetworkError(OBSError):
    """Exception raised for transport-level failures"""

    def __init__(self, underlying_error: BaseException):
        super().__init__(f"Network Error: {underlying_error}", "NETWORK_ERROR")
        self.underlying_error = underlying_error


class HTTPError(OBSError):
    """Exception raised when the server answers with a non-successful status"""

    def __init__(self, status_code: int, response: Optional['ErrorResponse'] = None):
        if response is not None:
            message = (
                f"HTTP Error {status_code}: {response.code} - {response.message} "
                f"(RequestID: {response.request_id})"
            )
        else:
            message = f"HTTP Error: Received status code {status_code}"
        super().__init__(message, "HTTP_ERROR", {"status_code": status_code})
        self.status_code = status_code
        self.response = response


class ResponseDecodingError(OBSError):
    """Exception raised when a server response cannot be decoded"""

    def __init__(self, reason: str):
        super().__init__(f"Response Decoding Failed: {reason}", "RESPONSE_DECODING_FAILED")


class InternalError(OBSError):
    """Exception raised for unexpected internal SDK failures"""

    def __init__(self, reason: str):
        super().__init__(f"Internal SDK Error: {reason}", "INTERNAL_ERROR")


class UnknownError(OBSError):
    """Exception raised for conditions the SDK cannot classify"""

    def __init__(self, reason: str):
        super().__init__(f"An unknown error occurred: {reason}", "UNKNOWN_ERROR")
