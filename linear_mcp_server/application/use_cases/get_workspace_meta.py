import logging

from linear_mcp_server.application.ports.linear_port import LinearPort

logger = logging.getLogger(__name__)


class GetViewerUseCase:
    """인증된 사용자(viewer)의 프로필, 팀, 조직 요약을 조회하는 Use Case"""

    def __init__(self, linear_port: LinearPort):
        self.linear_port = linear_port

    async def execute(self) -> dict:
        viewer = await self.linear_port.get_viewer()
        logger.info("✅ viewer 조회 완료: %s (팀 %d개)", viewer.name, len(viewer.teams))

        organization = viewer.organization
        return {
            "id": viewer.id,
            "name": viewer.name,
            "email": viewer.email,
            "admin": viewer.admin,
            "teams": [{"id": t.id, "name": t.name, "key": t.key} for t in viewer.teams],
            "organization": {
                "id": organization.id,
                "name": organization.name,
                "urlKey": organization.url_key,
            } if organization else None,
        }


class GetOrganizationUseCase:
    """조직 정보(팀, 사용자 목록 포함)를 조회하는 Use Case"""

    def __init__(self, linear_port: LinearPort):
        self.linear_port = linear_port

    async def execute(self) -> dict:
        organization = await self.linear_port.get_organization()
        logger.info(
            "✅ 조직 조회 완료: %s (팀 %d개, 사용자 %d명)",
            organization.name, len(organization.teams), len(organization.users),
        )

        return {
            "id": organization.id,
            "name": organization.name,
            "urlKey": organization.url_key,
            "teams": [{"id": t.id, "name": t.name, "key": t.key} for t in organization.teams],
            "users": [
                {
                    "id": u.id,
                    "name": u.name,
                    "email": u.email,
                    "admin": u.admin,
                    "active": u.active,
                }
                for u in organization.users
            ],
        }
