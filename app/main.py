import logging

from fastapi import FastAPI
from app.clients import GoogleSheetsClient

from app.core.config import settings
from app.api.v1.router import api_v1_router
from app.services.dependencies import close_services

logging.basicConfig(
	level=logging.DEBUG if settings.debug else logging.INFO,
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("scb.main")

app = FastAPI(title=settings.app_name)

app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/")
def read_root():
	return {"message": "Hello from app.main"}


@app.on_event("startup")
def startup() -> None:
	try:
		app.state.sheets_client = GoogleSheetsClient()
	except ValueError as e:
		# 未配置凭据时仍可读取缓存
		logger.error(f"Google Sheets 客户端初始化失败: {e}")
		app.state.sheets_client = None


@app.on_event("shutdown")
async def shutdown() -> None:
	await close_services()
