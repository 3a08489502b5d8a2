"""Environment-driven settings and container assembly."""

from __future__ import annotations

import pytest

from linear_mcp_server.adapters.outbound.linear_adapter import LinearAdapter
from linear_mcp_server.configuration import container as container_module
from linear_mcp_server.configuration import settings as settings_module
from linear_mcp_server.configuration.settings import build_settings
from linear_mcp_server.domain.errors import ConfigurationError

_ENV_VARS = (
    "LINEAR_API_KEY",
    "APP_ENV",
    "SERVER_NAME",
    "LINEAR_API_URL",
    "LINEAR_TIMEOUT",
    "LINEAR_MAX_CONCURRENCY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # 로컬 .env 파일이 테스트 결과에 영향을 주지 않도록
    monkeypatch.setattr(settings_module, "load_dotenv", lambda *args, **kwargs: None)
    container_module.clear_container()
    yield
    container_module.clear_container()


class TestBuildSettings:
    def test_missing_api_key(self) -> None:
        with pytest.raises(ConfigurationError, match="LINEAR_API_KEY environment variable is required"):
            build_settings()

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_secret")

        settings = build_settings()

        assert settings.app_env == "local"
        assert settings.server_name == "linear-mcp-server"
        assert settings.linear_api_url == "https://api.linear.app/graphql"
        assert settings.linear_timeout == 30.0
        assert settings.max_concurrency == 10

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_secret")
        monkeypatch.setenv("APP_ENV", "prod")
        monkeypatch.setenv("LINEAR_TIMEOUT", "2.5")
        monkeypatch.setenv("LINEAR_MAX_CONCURRENCY", "3")

        settings = build_settings()

        assert settings.app_env == "prod"
        assert settings.linear_timeout == 2.5
        assert settings.max_concurrency == 3

    @pytest.mark.parametrize("value", ["abc", "0", "-1"])
    def test_invalid_concurrency(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_secret")
        monkeypatch.setenv("LINEAR_MAX_CONCURRENCY", value)

        with pytest.raises(ConfigurationError, match="LINEAR_MAX_CONCURRENCY"):
            build_settings()

    def test_repr_hides_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_secret")
        assert "lin_api_secret" not in repr(build_settings())


class TestBuildContainer:
    async def test_wires_linear_adapter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_secret")

        container = container_module.build_container()

        assert isinstance(container.linear_port, LinearAdapter)
        assert container_module.build_container() is container
        await container.linear_port.aclose()
