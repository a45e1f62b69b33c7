import pytest

from aliyunclient.exceptions import ConfigurationError
from aliyunclient.settings import DEFAULT_REGION_ID, DEFAULT_SMS_ENDPOINT, load_settings

ENV_VARS = [
    "ALIYUN_ACCESS_KEY_ID",
    "ALIYUN_ACCESS_KEY_SECRET",
    "ALIYUN_REGION_ID",
    "ALIYUN_SMS_ENDPOINT",
    "ALIYUN_SMS_SIGN_NAME",
    "ALIYUN_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_load_settings_defaults(monkeypatch):
    monkeypatch.setenv("ALIYUN_ACCESS_KEY_ID", " testId ")
    monkeypatch.setenv("ALIYUN_ACCESS_KEY_SECRET", "testSecret")

    settings = load_settings(dotenv=False)

    assert settings.access_key_id == "testId"
    assert settings.access_key_secret == "testSecret"
    assert settings.region_id == DEFAULT_REGION_ID
    assert settings.endpoint == DEFAULT_SMS_ENDPOINT
    assert settings.sign_name is None
    assert settings.timeout == 30.0


def test_load_settings_overrides(monkeypatch):
    monkeypatch.setenv("ALIYUN_ACCESS_KEY_ID", "testId")
    monkeypatch.setenv("ALIYUN_ACCESS_KEY_SECRET", "testSecret")
    monkeypatch.setenv("ALIYUN_REGION_ID", "ap-southeast-1")
    monkeypatch.setenv("ALIYUN_SMS_ENDPOINT", "https://dysmsapi.ap-southeast-1.aliyuncs.com")
    monkeypatch.setenv("ALIYUN_SMS_SIGN_NAME", "Demo")
    monkeypatch.setenv("ALIYUN_TIMEOUT", "2.5")

    settings = load_settings(dotenv=False)

    assert settings.region_id == "ap-southeast-1"
    assert settings.endpoint == "https://dysmsapi.ap-southeast-1.aliyuncs.com"
    assert settings.sign_name == "Demo"
    assert settings.timeout == 2.5


def test_load_settings_reads_dotenv(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text(
        "ALIYUN_ACCESS_KEY_ID=fromFile\nALIYUN_ACCESS_KEY_SECRET=fileSecret\n", encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)

    settings = load_settings()

    assert settings.access_key_id == "fromFile"


@pytest.mark.parametrize("present", [[], ["ALIYUN_ACCESS_KEY_ID"], ["ALIYUN_ACCESS_KEY_SECRET"]])
def test_load_settings_requires_credentials(monkeypatch, present):
    for name in present:
        monkeypatch.setenv(name, "value")

    with pytest.raises(ConfigurationError):
        load_settings(dotenv=False)


def test_load_settings_rejects_bad_timeout(monkeypatch):
    monkeypatch.setenv("ALIYUN_ACCESS_KEY_ID", "testId")
    monkeypatch.setenv("ALIYUN_ACCESS_KEY_SECRET", "testSecret")
    monkeypatch.setenv("ALIYUN_TIMEOUT", "soon")

    with pytest.raises(ConfigurationError):
        load_settings(dotenv=False)


def test_settings_repr_hides_secret(monkeypatch):
    monkeypatch.setenv("ALIYUN_ACCESS_KEY_ID", "testId")
    monkeypatch.setenv("ALIYUN_ACCESS_KEY_SECRET", "testSecret")

    assert "testSecret" not in repr(load_settings(dotenv=False))
