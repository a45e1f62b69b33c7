from .auth import AliyunAuth
from .client import AliyunClient
from .exceptions import (
    AliyunClientError,
    ConfigurationError,
    EncodingError,
    SigningUnavailable,
)
from .response import VerificationResult, verify_response
from .settings import AliyunSettings, load_settings
from .signature import (
    Signer,
    canonicalize,
    generate_signature,
    percent_encode,
    sign,
    string_to_sign,
)

__all__ = [
    "AliyunAuth",
    "AliyunClient",
    "AliyunClientError",
    "AliyunSettings",
    "ConfigurationError",
    "EncodingError",
    "Signer",
    "SigningUnavailable",
    "VerificationResult",
    "canonicalize",
    "generate_signature",
    "load_settings",
    "percent_encode",
    "sign",
    "string_to_sign",
    "verify_response",
]
