"""Error types raised by the Aliyun signing client."""


class AliyunClientError(Exception):
    """Base class for all errors raised by aliyunclient."""


class ConfigurationError(AliyunClientError, ValueError):
    """Missing or invalid credential/setting, detected at construction time."""


class SigningUnavailable(ConfigurationError):
    """The keyed-hash primitive cannot be initialised (empty key, unknown algorithm)."""


class EncodingError(AliyunClientError, ValueError):
    """Text could not be represented as UTF-8 while canonicalizing or signing."""
