from typing import Any


class LinearMcpError(Exception):
    """서버에서 발생하는 모든 도메인 예외의 기반 클래스"""


class ConfigurationError(LinearMcpError, RuntimeError):
    """필수 설정 누락/형식 오류 (시작 시점에서만 발생, 치명적)"""


class LinearNotFoundError(LinearMcpError):
    """참조한 id/identifier가 Linear에 존재하지 않음"""


class LinearApiError(LinearMcpError):
    """Linear GraphQL API 호출 자체가 실패한 경우 (네트워크, 인증, rate limit 등)"""

    def __init__(self, message: str, status: int | None = None, data: Any = None):
        super().__init__(message)
        self.status = status
        self.data = data


class UnsupportedRequestError(LinearMcpError):
    """알 수 없는 tool / resource scheme / prompt 이름"""


class InvalidResourceError(LinearMcpError, ValueError):
    """지원되는 resource지만 경로 파라미터가 비어 있거나 잘못된 경우"""
