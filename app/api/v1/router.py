from fastapi import APIRouter

from .endpoints import health, charts

api_v1_router = APIRouter()
api_v1_router.include_router(health.router, tags=["健康检查"])
api_v1_router.include_router(charts.router, prefix="/charts", tags=["图表数据"])
