"""Error taxonomy shared by every provider adapter.

Each error kind is its own class with a stable ``code`` so callers can branch
on the type (or the code) instead of parsing message text.
"""

from typing import List, Optional


class LLMError(Exception):
    """Base class for all errors raised by chatbridge."""

    code: str = "llm_error"
    error_type: str = "invalid_request_error"
    status_code: int = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def to_dict(self) -> dict:
        """Render in the OpenAI-style error envelope."""
        return {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.code,
            }
        }


class APIKeyNotSetError(LLMError):
    """Credential absent at call time."""

    code = "api_key_not_set"
    error_type = "authentication_error"
    status_code = 401


class APIKeyInvalidError(LLMError):
    """Vendor rejected the credential."""

    code = "api_key_invalid"
    error_type = "authentication_error"
    status_code = 401

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        is_cors_restriction: bool = False,
    ):
        super().__init__(message, cause)
        self.is_cors_restriction = is_cors_restriction


class ModelProviderMismatchError(LLMError):
    """Model is configured for a different vendor than the adapter."""

    code = "model_provider_mismatch"
    status_code = 400


class UnsupportedRequestShapeError(LLMError):
    """Request violates a vendor-specific structural rule."""

    code = "unsupported_request_shape"
    status_code = 400


class UnsupportedImageTypeError(LLMError):
    """Image mime type is outside the vendor allow-list."""

    code = "unsupported_image_type"
    status_code = 400

    def __init__(self, message: str, mime_type: str, supported_types: List[str]):
        super().__init__(message)
        self.mime_type = mime_type
        self.supported_types = list(supported_types)


class MalformedImageReferenceError(LLMError):
    """Image reference cannot be decoded into (mime type, bytes)."""

    code = "malformed_image_reference"
    status_code = 400


class UnsupportedContentTypeError(LLMError):
    """Content uses a modality that is not translated (e.g. tool calls)."""

    code = "unsupported_content_type"
    error_type = "api_error"
    status_code = 502


class EmbeddingsNotSupportedError(LLMError):
    """Vendor has no embedding endpoint."""

    code = "embeddings_not_supported"
    status_code = 400


class RequestCancelledError(LLMError):
    """Cancel token fired while a vendor call was in flight."""

    code = "request_cancelled"
    status_code = 499


class InvalidProviderConfigError(LLMError):
    """Provider record cannot be used to build a transport."""

    code = "invalid_provider_config"
    error_type = "server_error"
    status_code = 500


class ProviderNotFoundError(LLMError):
    """No adapter registered for the requested provider id."""

    code = "provider_not_found"
    status_code = 404


class ModelNotFoundError(LLMError):
    """No chat or embedding model configured under the requested id."""

    code = "model_not_found"
    status_code = 404


__all__ = [
    "APIKeyInvalidError",
    "APIKeyNotSetError",
    "EmbeddingsNotSupportedError",
    "InvalidProviderConfigError",
    "LLMError",
    "MalformedImageReferenceError",
    "ModelNotFoundError",
    "ModelProviderMismatchError",
    "ProviderNotFoundError",
    "RequestCancelledError",
    "UnsupportedContentTypeError",
    "UnsupportedImageTypeError",
    "UnsupportedRequestShapeError",
]
