from fastapi import APIRouter, Depends

from promoradar.api.deps import get_auth_service
from promoradar.models.user import AuthResponse, LoginRequest, SignupRequest
from promoradar.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["认证"])


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(payload: SignupRequest, service: AuthService = Depends(get_auth_service)):
    """注册"""
    return await service.signup(payload)


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """登录"""
    return await service.login(payload)
