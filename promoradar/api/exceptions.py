"""
全局异常处理器
所有错误统一返回 {"message": ...}
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from promoradar.core.exceptions import BusinessException, QuotaExceededException

logger = logging.getLogger(__name__)

# 供 main.py 一并导入
__all__ = [
    "BusinessException",
    "business_exception_handler",
    "validation_exception_handler",
    "http_exception_handler",
    "database_exception_handler",
    "general_exception_handler",
]


def _format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        message = error.get("msg", "参数错误")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "请求参数错误"


async def business_exception_handler(request: Request, exc: BusinessException) -> JSONResponse:
    """业务异常"""
    content = {"message": exc.message}
    if isinstance(exc, QuotaExceededException):
        content["quotaType"] = exc.quota_type
    if exc.status_code >= 500:
        logger.error(f"业务处理失败 {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=content)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求参数校验失败统一返回400"""
    message = _format_validation_errors(exc)
    logger.info(f"请求参数校验失败 {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"message": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "请求失败"
    return JSONResponse(status_code=exc.status_code, content={"message": message})


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"数据库操作失败 {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "数据库操作失败，请稍后重试"})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"未处理的异常 {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "服务器内部错误"})
