#!/usr/bin/env python3
"""
Fair Split - 后端主入口
"""

import asyncio
import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fairsplit.core.config import settings
from fairsplit.api import api_router
from fairsplit.core.database import init_db
from fairsplit.services.sweeper import expiry_sweeper

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger("fairsplit")

app = FastAPI(
    title=settings.APP_NAME,
    description="多人协商分价：总价固定，物品价格此消彼长，直到每人各得其一",
    version=settings.VERSION
)

# CORS设置
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册API路由
app.include_router(api_router, prefix="/api")

@app.on_event("startup")
async def startup_event():
    """应用启动时的初始化"""
    logger.info("🚀 启动 %s 后端服务...", settings.APP_NAME)
    await init_db()

    # 启动过期游戏清理任务
    app.state.sweeper_task = asyncio.create_task(expiry_sweeper())

@app.on_event("shutdown")
async def shutdown_event():
    """停止后台任务"""
    task = getattr(app.state, "sweeper_task", None)
    if task is not None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
    logger.info("服务已停止")

@app.get("/")
async def root():
    """根路径健康检查"""
    return {"message": f"{settings.APP_NAME} 后端运行中", "status": "healthy"}

@app.get("/health")
async def health_check():
    """健康检查端点"""
    return {"status": "healthy", "service": "fair-split"}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
