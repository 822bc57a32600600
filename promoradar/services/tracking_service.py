"""
用户行为追踪
"""

import logging
import time
from typing import Optional

from promoradar.models.behavior import TrackRequest
from promoradar.repositories.behavior_repository import BehaviorRepository, behavior_repository

logger = logging.getLogger(__name__)


def guest_id(client_ip: Optional[str]) -> str:
    """未登录访客的标识：guest_<ip>_<毫秒时间戳>"""
    return f"guest_{client_ip or 'unknown'}_{int(time.time() * 1000)}"


class TrackingService:
    """行为追踪服务，日志写入失败不影响请求"""

    def __init__(self, behavior_repo: Optional[BehaviorRepository] = None):
        self.behavior_repo = behavior_repo or behavior_repository

    async def track(self, payload: TrackRequest, user_id: Optional[int] = None, client_ip: Optional[str] = None) -> bool:
        actor = str(user_id) if user_id is not None else guest_id(client_ip)
        logged = await self.behavior_repo.log_user_behavior(
            user_id=actor,
            action=payload.action,
            promo_id=payload.promo_id,
            brand_name=payload.brand_name,
            search_keyword=payload.search_keyword,
            tags=payload.tags
        )
        if not logged:
            logger.debug(f"行为日志未写入 action={payload.action} user={actor}")
        return logged
