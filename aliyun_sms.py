"""Send an Aliyun SMS or print a signed request URL.

Credentials are read from the environment / .env file:
ALIYUN_ACCESS_KEY_ID, ALIYUN_ACCESS_KEY_SECRET, ALIYUN_SMS_SIGN_NAME.
"""

import json
import sys

from aliyunclient import AliyunClient, ConfigurationError, load_settings

USAGE = (
    "Usage:\n"
    "  python aliyun_sms.py url <Action>\n"
    "  python aliyun_sms.py send <phone[,phone...]> <template_code> [json_params]"
)


def print_signed_url(client: AliyunClient, action: str) -> str:
    """Print a signed GET URL for an action (handy for debugging with curl)."""
    url = client.build_url(action)
    print(f"=== Signed {action} URL ===")
    print(url)
    return url


def send(client: AliyunClient, phones: str, template_code: str, raw_params: str = "") -> bool:
    """Send an SMS and print the verdict."""
    template_param = json.loads(raw_params) if raw_params else None

    result = client.send_sms(
        phone_numbers=phones.split(","),
        template_code=template_code,
        template_param=template_param,
    )

    if result.success:
        print("\n=== SMS accepted ===")
    else:
        print("\n=== Error ===")
    print(f"Code: {result.code or '<no code in response>'}")
    return result.success


def main(argv: list) -> int:
    if len(argv) < 2:
        print(USAGE)
        return 2

    command = argv[1].lower()
    try:
        client = AliyunClient.from_settings(load_settings())

        if command == "url":
            print_signed_url(client, argv[2] if len(argv) > 2 else "SendSms")
            return 0
        if command == "send" and len(argv) >= 4:
            raw_params = argv[4] if len(argv) > 4 else ""
            return 0 if send(client, argv[2], argv[3], raw_params) else 1
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        return 1
    except json.JSONDecodeError as e:
        print(f"json_params is not valid JSON: {e}")
        print(USAGE)
        return 2

    print(USAGE)
    return 2


if __name__ == "__main__":
    sys.exit(main(sys.argv))
