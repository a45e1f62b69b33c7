# signature.py
import base64
import hmac
from typing import Any, Mapping
from urllib.parse import quote_plus

from dlt.common import logger

from .exceptions import EncodingError, SigningUnavailable

SIGNATURE_METHOD = "HMAC-SHA1"
SIGNATURE_VERSION = "1.0"
DEFAULT_ALGORITHM = "sha1"

# Path of the RPC endpoint, always "/" for POP style APIs
ROOT_PATH = "/"


def _utf8(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"text is not representable as UTF-8: {e.reason}") from e


def _to_text(value: Any) -> str:
    if value is None:
        raise EncodingError("parameter names and values must not be None")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(f"bytes are not valid UTF-8: {e.reason}") from e
    return value if isinstance(value, str) else str(value)


def percent_encode(value: str) -> str:
    """Percent-encode a single name or value the way Aliyun POP expects.

    Standard UTF-8 form encoding, followed by exactly three rewrites
    (applied in this order):
    - "+"   -> "%20"
    - "*"   -> "%2A"
    - "%7E" -> "~"
    """
    try:
        encoded = quote_plus(_to_text(value), safe="", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(f"text is not representable as UTF-8: {e.reason}") from e

    return encoded.replace("+", "%20").replace("*", "%2A").replace("%7E", "~")


def canonicalize(params: Mapping[str, Any]) -> str:
    """Build the canonical query string for a parameter set.

    Keys are sorted by their UTF-8 bytes, names and values are encoded
    independently with `percent_encode`, pairs are joined with "=" and
    separated by "&". An empty mapping gives an empty string.
    """
    items = [(_to_text(key), _to_text(value)) for key, value in params.items()]
    items.sort(key=lambda item: _utf8(item[0]))

    return "&".join(
        f"{percent_encode(key)}={percent_encode(value)}" for key, value in items
    )


def string_to_sign(method: str, canonical_query: str) -> str:
    """METHOD & %2F & percent_encode(canonical_query)."""
    method = _to_text(method).upper()
    _utf8(method)

    return "&".join(
        [
            method,
            percent_encode(ROOT_PATH),
            percent_encode(canonical_query),
        ]
    )


class Signer:
    """HMAC signer bound to one AccessKey secret.

    The key ("<secret>&") and the hash primitive are prepared once here, so
    a bad secret or an unsupported algorithm fails at construction instead
    of on the first request. Each `sign` call works on its own copy of the
    prepared MAC, which makes a single instance safe to share between threads.
    """

    def __init__(self, access_key_secret: str, algorithm: str = DEFAULT_ALGORITHM):
        if not isinstance(access_key_secret, str):
            raise SigningUnavailable(
                f"access key secret must be str, got {type(access_key_secret).__name__}"
            )
        if not access_key_secret:
            raise SigningUnavailable("access key secret must not be empty")

        try:
            key = f"{access_key_secret}&".encode("utf-8")
        except UnicodeEncodeError as e:
            raise SigningUnavailable("access key secret is not valid UTF-8") from e

        try:
            self._mac = hmac.new(key, digestmod=algorithm)
        except (TypeError, ValueError) as e:
            raise SigningUnavailable(f"HMAC-{algorithm} is not available: {e}") from e

        self.algorithm = algorithm

    def __repr__(self) -> str:
        return f"{type(self).__name__}(algorithm={self.algorithm!r}, access_key_secret='***')"

    def sign(self, method: str, canonical_query: str) -> str:
        """Sign an already canonicalized query string, returns base64 text."""
        message = string_to_sign(method, canonical_query)
        logger.debug(f"Signing request, string-to-sign is {len(message)} chars")

        mac = self._mac.copy()
        mac.update(_utf8(message))
        return base64.b64encode(mac.digest()).decode("ascii")

    def sign_parameters(self, params: Mapping[str, Any], method: str = "GET") -> str:
        return self.sign(method, canonicalize(params))


def sign(method: str, canonical_query: str, access_key_secret: str) -> str:
    return Signer(access_key_secret).sign(method, canonical_query)


def generate_signature(
    access_key_secret: str, parameters: Mapping[str, Any], method: str = "GET"
) -> str:
    """
    Create the HMAC-SHA1 signature for an Aliyun POP API call.

    Steps:
    1. Sort parameters by key and percent-encode them into a query string
    2. Build: METHOD + "&" + "%2F" + "&" + percent_encode(query string)
    3. HMAC-SHA1 keyed with access_key_secret + "&"
    4. Base64 encode the digest
    """
    return Signer(access_key_secret).sign_parameters(parameters, method)
