#!/usr/bin/env python3
"""
重置数据库脚本 - 删除所有表后重新建表（仅限开发环境）
"""

import sys
import os
import logging

# 添加项目根目录到Python路径
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import fairsplit.models  # noqa: F401
from fairsplit.core.config import settings
from fairsplit.core.database import Base, engine

logger = logging.getLogger("fairsplit.reset")

def reset_database(bind=engine) -> None:
    """按依赖倒序删除所有表，再重新创建"""
    logger.info("🔄 正在重置数据库...")
    Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)
    logger.info("✅ 数据库重置完成")

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(message)s")
    if not settings.DEBUG:
        logger.error("❌ 生产环境禁止重置数据库")
        sys.exit(1)
    try:
        reset_database()
    except Exception as e:
        logger.error("❌ 重置数据库失败: %s", e)
        sys.exit(1)
