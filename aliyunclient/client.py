# client.py
import json
import uuid
from typing import Any, Iterable, Mapping, Optional, Union

import httpx
from dlt.common import logger
from dlt.common.pendulum import pendulum

from .exceptions import ConfigurationError
from .response import VerificationResult, verify_response
from .settings import DEFAULT_REGION_ID, DEFAULT_SMS_ENDPOINT, DEFAULT_TIMEOUT, AliyunSettings
from .signature import SIGNATURE_METHOD, SIGNATURE_VERSION, Signer, canonicalize, percent_encode

DEFAULT_SMS_VERSION = "2017-05-25"


class AliyunClient:
    """Calls Aliyun POP (RPC style) APIs such as Dysmsapi SendSms."""

    FORMAT = "JSON"
    TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

    def __init__(
        self,
        access_key_id: str,
        access_key_secret: str,
        region_id: str = DEFAULT_REGION_ID,
        endpoint: str = DEFAULT_SMS_ENDPOINT,
        version: str = DEFAULT_SMS_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        sign_name: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not access_key_id:
            raise ConfigurationError("access key id must not be empty")

        self.access_key_id = access_key_id
        self.signer = Signer(access_key_secret)
        self.region_id = region_id
        self.endpoint = endpoint.rstrip("/")
        self.version = version
        self.timeout = timeout
        self.sign_name = sign_name
        self._transport = transport

    @classmethod
    def from_settings(
        cls, settings: AliyunSettings, transport: Optional[httpx.BaseTransport] = None
    ) -> "AliyunClient":
        return cls(
            access_key_id=settings.access_key_id,
            access_key_secret=settings.access_key_secret,
            region_id=settings.region_id,
            endpoint=settings.endpoint,
            timeout=settings.timeout,
            sign_name=settings.sign_name,
            transport=transport,
        )

    def _get_timestamp(self) -> str:
        """UTC timestamp in ISO 8601, e.g. 2017-07-12T02:42:19Z."""
        return pendulum.now("UTC").strftime(self.TIMESTAMP_FORMAT)

    def _get_nonce(self) -> str:
        return str(uuid.uuid4())

    def system_parameters(self, action: str) -> dict:
        """Protocol parameters every POP call must carry."""
        return {
            "AccessKeyId": self.access_key_id,
            "Action": action,
            "Format": self.FORMAT,
            "RegionId": self.region_id,
            "SignatureMethod": SIGNATURE_METHOD,
            "SignatureNonce": self._get_nonce(),
            "SignatureVersion": SIGNATURE_VERSION,
            "Timestamp": self._get_timestamp(),
            "Version": self.version,
        }

    def build_url(
        self,
        action: str,
        params: Optional[Mapping[str, Any]] = None,
        method: str = "GET",
    ) -> str:
        """
        Build a signed request URL.

        Args:
            action: API action name (e.g. "SendSms")
            params: Business parameters, these override system parameters
            method: HTTP method the signature is computed for

        Returns:
            endpoint + "/?Signature=<sig>&<canonical query>"
        """
        all_params = {**self.system_parameters(action), **(params or {})}

        canonical_query = canonicalize(all_params)
        signature = self.signer.sign(method, canonical_query)
        logger.debug(f"Signed {action} with parameters {sorted(all_params)}")

        return f"{self.endpoint}/?Signature={percent_encode(signature)}&{canonical_query}"

    def _get(self, action: str, params: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        url = self.build_url(action, params)
        logger.info(f"Calling Aliyun {action} at {self.endpoint}")

        with httpx.Client(transport=self._transport, timeout=self.timeout) as http:
            return http.get(url)

    def execute(self, action: str, params: Optional[Mapping[str, Any]] = None) -> dict:
        """
        Call an Aliyun API action.

        Returns:
            Decoded JSON response, or an empty dict if the body is not JSON
        """
        response = self._get(action, params)
        try:
            data = response.json()
        except ValueError:
            logger.warning(
                f"Aliyun {action} returned non-JSON body (HTTP {response.status_code})"
            )
            return {}
        return data if isinstance(data, dict) else {}

    def send_sms(
        self,
        phone_numbers: Union[str, Iterable[str]],
        template_code: str,
        template_param: Optional[Mapping[str, Any]] = None,
        sign_name: Optional[str] = None,
        out_id: Optional[str] = None,
    ) -> VerificationResult:
        """
        Send a templated SMS through Dysmsapi.

        Args:
            phone_numbers: One number, or several (joined with ",")
            template_code: Approved template code, e.g. "SMS_123456"
            template_param: Values for the template variables
            sign_name: SMS signature name, defaults to the client's sign_name
            out_id: Caller supplied id echoed back in delivery receipts

        Returns:
            VerificationResult for the API response
        """
        sign_name = sign_name or self.sign_name
        if not sign_name:
            raise ConfigurationError("sign_name is required to send SMS")

        if not isinstance(phone_numbers, str):
            phone_numbers = ",".join(phone_numbers)

        params = {
            "PhoneNumbers": phone_numbers,
            "SignName": sign_name,
            "TemplateCode": template_code,
        }
        if template_param:
            params["TemplateParam"] = json.dumps(
                template_param, separators=(",", ":"), ensure_ascii=False
            )
        if out_id:
            params["OutId"] = out_id

        response = self._get("SendSms", params)
        return verify_response(response.content)
