"""Reduce an Aliyun POP response body to a pass/fail verdict."""

import json
from typing import Any, Mapping, NamedTuple, Optional, Union

from dlt.common import logger

# Code returned by the API when the call was accepted
SUCCESS_CODE = "OK"
CODE_FIELD = "Code"


class VerificationResult(NamedTuple):
    success: bool
    code: str


def _decode_body(body: Union[str, bytes, Mapping[str, Any], None]) -> Optional[Mapping[str, Any]]:
    if isinstance(body, Mapping):
        return body
    if not body:
        return None

    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        logger.warning(f"Aliyun response body is not valid JSON: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Aliyun response body is a JSON {type(data).__name__}, expected an object")
        return None
    return data


def verify_response(body: Union[str, bytes, Mapping[str, Any], None]) -> VerificationResult:
    """Check the `Code` field of a response body against "OK".

    Never raises on bad remote input: an empty or malformed body, or one
    without a `Code` field, gives `VerificationResult(False, "")`.

    Args:
        body: Raw response text/bytes, or an already decoded JSON object

    Returns:
        VerificationResult with success flag and the code as returned
    """
    data = _decode_body(body)
    if data is None:
        return VerificationResult(success=False, code="")

    code = data.get(CODE_FIELD)
    if code is None:
        logger.warning(f"Aliyun response has no {CODE_FIELD} field")
        return VerificationResult(success=False, code="")

    code = code if isinstance(code, str) else str(code)
    result = VerificationResult(success=code == SUCCESS_CODE, code=code)

    if result.success:
        logger.info(f"Aliyun call succeeded with code {code}")
    else:
        logger.warning(f"Aliyun call rejected with code {code}: {data.get('Message', '')}")
    return result
