import asyncio
import logging
import os
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path

from mcp.server import Server
from mcp.server.stdio import stdio_server

from linear_mcp_server.adapters.inbound.mcp.prompts import register_prompts
from linear_mcp_server.adapters.inbound.mcp.resources import register_resources
from linear_mcp_server.adapters.inbound.mcp.tools import register_tools
from linear_mcp_server.configuration.container import build_container, clear_container

logger = logging.getLogger(__name__)


def setup_logging() -> logging.Logger:
    """로깅 설정: stderr와 파일 두 곳에 로그 출력 (stdout은 MCP 채널이므로 사용하지 않음)"""
    log_dir = Path(os.getenv("LOG_DIR", Path(__file__).parent.parent / "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "mcp-server.log"

    formatter = logging.Formatter(
        '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # 1. stderr 핸들러 (MCP 호스트 로그에 표시)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    # 2. 파일 핸들러 (최대 10MB, 5개 백업)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    return logging.getLogger(__name__)


def create_app(container) -> Server:
    """Tool/Resource/Prompt 핸들러가 등록된 MCP 서버를 생성합니다."""
    app = Server(container.settings.server_name)
    register_tools(app, container)
    register_resources(app, container)
    register_prompts(app)
    return app


async def main() -> None:
    try:
        logger.info("=" * 60)
        logger.info("Linear MCP 서버 초기화 시작")

        container = build_container()
        logger.info("✅ Container 빌드 완료")
        logger.info("서버 이름: %s", container.settings.server_name)
        logger.info("환경: %s", container.settings.app_env)
        logger.info("Linear API: %s", container.settings.linear_api_url)
        logger.info("연관 필드 동시 조회 상한: %d", container.settings.max_concurrency)

        app = create_app(container)
        logger.info("✅ MCP Tools/Resources/Prompts 등록 완료")

        logger.info("MCP 서버 시작 중...")
        logger.info("=" * 60)

        try:
            async with stdio_server() as (read_stream, write_stream):
                await app.run(read_stream, write_stream, app.create_initialization_options())
        finally:
            await container.linear_port.aclose()
            if container.settings.app_env == "local":
                clear_container()
            logger.info("MCP 서버 종료")

    except Exception as e:
        logger.error("=" * 60)
        logger.error("MCP 서버 시작 실패!")
        logger.error("오류 타입: %s", type(e).__name__)
        logger.error("오류 메시지: %s", str(e))
        logger.error("=" * 60)
        traceback.print_exc(file=sys.stderr)
        raise


def run() -> None:
    """콘솔 스크립트 진입점. 시작 실패 시 종료 코드 1로 끝납니다."""
    setup_logging()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
    except Exception:
        sys.exit(1)


if __name__ == "__main__":
    run()
