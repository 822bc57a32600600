"""
业务异常定义
服务层抛出，由 promoradar.api.exceptions 中的处理器统一转换为 {"message": ...} 响应
"""

from typing import Optional


class BusinessException(Exception):
    """业务异常基类"""

    status_code: int = 400

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationException(BusinessException):
    """参数或业务规则校验失败"""
    status_code = 400


class AuthenticationException(BusinessException):
    """未登录或凭证无效"""
    status_code = 401


class ForbiddenException(BusinessException):
    """无权操作"""
    status_code = 403


class NotFoundException(BusinessException):
    """资源不存在"""
    status_code = 404


class ConflictException(BusinessException):
    """资源冲突（重复注册、品牌代号已存在等）"""
    status_code = 409


class QuotaExceededException(BusinessException):
    """领取名额已满"""

    status_code = 400

    PER_USER = "per_user"
    DAILY = "daily"
    GLOBAL = "global"

    _messages = {
        PER_USER: "已达到个人领取上限",
        DAILY: "今日名额已领完",
        GLOBAL: "活动名额已领完",
    }

    def __init__(self, quota_type: str):
        super().__init__(self._messages.get(quota_type, "名额已满"))
        self.quota_type = quota_type


class PersistenceException(BusinessException):
    """数据写入失败"""
    status_code = 500
