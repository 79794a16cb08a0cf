"""
应用配置模块
"""

from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """应用设置"""
    
    # 基础设置
    APP_NAME: str = "Fair Split"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    
    # 服务器设置
    HOST: str = "0.0.0.0"
    PORT: int = 8001
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]
    
    # 数据库设置
    DATABASE_URL: str = "sqlite:///./fairsplit.db"
    
    # 游戏生命周期设置
    ACTIVE_TTL_HOURS: int = 48  # 活跃游戏无操作后的过期时间
    RESOLVED_TTL_HOURS: int = 12  # 达成共识后的保留时间
    SWEEP_INTERVAL_SECONDS: int = 3600  # 过期清理间隔
    
    # 价格设置
    PRICE_PLACES: int = 2  # 价格小数位
    PRICE_EPSILON: str = "0.01"  # 总价校验容差
    MAX_ITEMS: int = 50
    
    class Config:
        env_file = ".env"
        case_sensitive = True

# 全局设置实例
settings = Settings()
