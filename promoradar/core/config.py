from pydantic_settings import BaseSettings
from typing import List, Optional
from enum import Enum


class Environment(str, Enum):

    """运行环境枚举"""
    TESTING = "testing"
    PRODUCTION = "production"


class Settings(BaseSettings):

    # 应用基础配置
    app_name: str = "PromoRadar"
    app_version: str = "1.0.0"
    environment: Environment = Environment.TESTING
    debug: bool = True

    # 数据库配置
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "promo"
    db_user: str = "postgres"
    db_password: str = "password"

    # Redis配置 (目录数据缓存)
    redis_url: Optional[str] = None
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0

    # MongoDB配置 (行为日志，未配置时不记录)
    mongodb_uri: Optional[str] = None
    mongodb_db_name: str = "coupon_radar"

    # JWT配置
    jwt_secret: str = "dev-secret-please-change"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 120

    # 名额统计配置
    report_utc_offset_hours: int = 8  # 每日名额按该时区的自然日计算
    usage_report_days: int = 30
    dataset_cache_ttl: int = 300

    # CORS配置 (逗号分隔)
    cors_origins: str = "http://localhost:4000,http://localhost:5173"

    # 日志配置
    log_level: str = "INFO"

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

    @property
    def database_url_computed(self) -> str:
        """计算数据库URL"""
        if self.database_url:
            return self.database_url
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def redis_url_computed(self) -> str:
        """计算Redis URL"""
        if self.redis_url:
            return self.redis_url
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def cors_origin_list(self) -> List[str]:
        """解析CORS来源列表"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False


# 全局配置实例
settings = Settings()
