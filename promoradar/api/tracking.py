from typing import Optional

from fastapi import APIRouter, Depends, Request

from promoradar.api.deps import get_optional_user_id, get_tracking_service
from promoradar.models.behavior import TrackRequest
from promoradar.services.tracking_service import TrackingService

router = APIRouter(prefix="/api", tags=["行为追踪"])


@router.post("/track")
async def track(
    payload: TrackRequest,
    request: Request,
    user_id: Optional[int] = Depends(get_optional_user_id),
    service: TrackingService = Depends(get_tracking_service)
):
    """上报用户行为，日志写入失败也返回成功"""
    client_ip = request.client.host if request.client else None
    await service.track(payload, user_id=user_id, client_ip=client_ip)
    return {"success": True}
