import pytest

from aliyunclient.response import VerificationResult, verify_response


def test_ok_code_is_success():
    assert verify_response('{"Code":"OK"}') == VerificationResult(success=True, code="OK")


def test_rejected_code_is_failure():
    result = verify_response('{"Code":"InvalidParameter","Message":"bad phone"}')
    assert result == VerificationResult(success=False, code="InvalidParameter")


def test_code_comparison_is_case_sensitive():
    assert verify_response('{"Code":"ok"}') == VerificationResult(False, "ok")


def test_accepts_bytes_and_decoded_body():
    assert verify_response(b'{"Code":"OK","RequestId":"abc"}').success
    assert verify_response({"Code": "OK"}).success


@pytest.mark.parametrize(
    "body",
    ["", None, b"", "not json", "{", "[1, 2]", '"OK"', "{}", '{"Message":"no code"}', b"\xff\xfe"],
)
def test_malformed_or_empty_body_never_raises(body):
    assert verify_response(body) == VerificationResult(success=False, code="")


def test_non_string_code_is_stringified():
    assert verify_response('{"Code": 500}') == VerificationResult(False, "500")
