import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from linear_mcp_server.domain.errors import ConfigurationError

_PROJECT_ROOT = Path(__file__).parent.parent.parent


def _load_env() -> None:
    app_env = os.getenv("APP_ENV", "local")
    # .env.{APP_ENV} 우선, 그다음 .env (이미 설정된 환경 변수는 덮어쓰지 않음)
    load_dotenv(_PROJECT_ROOT / f".env.{app_env}")
    load_dotenv(_PROJECT_ROOT / ".env")


@dataclass(frozen=True)
class Settings:
    app_env: str
    server_name: str
    linear_api_key: str = field(repr=False)  # 로그에 남지 않도록 repr에서 제외
    linear_api_url: str
    linear_timeout: float
    max_concurrency: int   # 연관 필드 동시 조회 상한


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        value = cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} 값이 올바르지 않습니다: {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{name} 값은 0보다 커야 합니다: {raw!r}")
    return value


def build_settings() -> Settings:
    _load_env()

    api_key = os.getenv("LINEAR_API_KEY")
    if not api_key:
        raise ConfigurationError("LINEAR_API_KEY environment variable is required")

    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        server_name=os.getenv("SERVER_NAME", "linear-mcp-server"),
        linear_api_key=api_key,
        linear_api_url=os.getenv("LINEAR_API_URL", "https://api.linear.app/graphql"),
        linear_timeout=_env_number("LINEAR_TIMEOUT", "30", float),
        max_concurrency=_env_number("LINEAR_MAX_CONCURRENCY", "10", int),
    )
