from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSettings(BaseModel):
	"""Google Sheets 相关配置。支持嵌套环境变量：
	- SCB_GOOGLE__CREDENTIALS_FILE
	- SCB_GOOGLE__CREDENTIALS_JSON
	- SCB_GOOGLE__SCOPES（JSON 列表，如 ["https://www.googleapis.com/auth/spreadsheets.readonly"]）
	- SCB_GOOGLE__TIMEOUT_SECONDS
	"""

	credentials_file: Optional[str] = Field(
		default=None, description="Service Account JSON 文件路径"
	)
	credentials_json: Optional[str] = Field(
		default=None, description="Service Account JSON 内容（优先于文件）"
	)
	scopes: List[str] = Field(
		default_factory=lambda: ["https://www.googleapis.com/auth/spreadsheets.readonly"],
		description="OAuth scopes",
	)
	timeout_seconds: int = Field(
		default=10, ge=1, le=120, description="批量读取超时时间（秒）"
	)

	@field_validator("scopes", mode="before")
	@classmethod
	def _parse_scopes(cls, v):
		if v is None:
			return []
		if isinstance(v, str):
			# 逗号分隔
			return [item.strip() for item in v.split(",") if item.strip()]
		return v


class RedisSettings(BaseModel):
	"""Redis 基础配置。优先使用 `url`，否则拼装分段配置。支持：
	- SCB_REDIS__URL
	- SCB_REDIS__HOST / PORT / DB / USERNAME / PASSWORD / SSL
	"""

	url: Optional[str] = Field(default=None, description="Redis 连接 URL，优先使用")
	host: str = Field(default="127.0.0.1", description="Redis 主机")
	port: int = Field(default=6379, ge=1, le=65535, description="Redis 端口")
	db: int = Field(default=0, ge=0, description="Redis DB 索引")
	username: Optional[str] = Field(default=None, description="用户名，可选")
	password: Optional[str] = Field(default=None, description="密码，可选")
	ssl: bool = Field(default=False, description="是否启用 SSL")

	@property
	def dsn(self) -> str:
		if self.url:
			return self.url
		scheme = "rediss" if self.ssl else "redis"
		# 用户名密码
		auth_part = ""
		if self.username and self.password:
			auth_part = f"{self.username}:{self.password}@"
		elif self.password and not self.username:
			auth_part = f":{self.password}@"
		return f"{scheme}://{auth_part}{self.host}:{self.port}/{self.db}"


class CacheSettings(BaseModel):
	"""结果缓存配置：
	- SCB_CACHE__BACKEND：redis / file / memory
	- SCB_CACHE__FILE_DIR：file 后端的缓存目录
	- SCB_CACHE__KEY_PREFIX：缓存键前缀
	"""

	backend: Literal["redis", "file", "memory"] = Field(default="redis", description="缓存后端")
	file_dir: str = Field(default="sheets-cache", description="文件缓存目录")
	key_prefix: str = Field(default="scb", description="缓存键前缀")


class ChartSettings(BaseModel):
	"""图表区块取数配置：
	- SCB_CHART__BADGE_COLUMN：徽标列字母
	- SCB_CHART__DEFAULT_START_ROW / DEFAULT_END_ROW：范围解析失败时的默认行窗口
	- SCB_CHART__ROW_DOMAIN_SOURCE：行域基准（labels / first_overlay）
	"""

	badge_column: str = Field(default="B", description="徽标所在列")
	default_start_row: int = Field(default=2, ge=1, description="默认起始行（1-based）")
	default_end_row: int = Field(default=13, ge=1, description="默认结束行（1-based）")
	row_domain_source: Literal["labels", "first_overlay"] = Field(
		default="labels", description="决定行数的列"
	)

	@field_validator("badge_column")
	@classmethod
	def _check_badge_column(cls, v: str) -> str:
		val = (v or "").strip()
		if not val.isalpha() or not val.isascii():
			raise ValueError(f"badge_column 必须为列字母: {v!r}")
		return val.upper()

	@field_validator("default_end_row")
	@classmethod
	def _check_window(cls, v: int, info):
		start = info.data.get("default_start_row")
		if start is not None and v < start:
			raise ValueError("default_end_row 不能小于 default_start_row")
		return v


class Settings(BaseSettings):

	app_name: str = "Sheets Chart API"
	debug: bool = True
	reload: bool = True
	host: str = "127.0.0.1"
	port: int = 8000

	# 嵌套配置
	google: GoogleSettings = Field(default_factory=GoogleSettings)
	redis: RedisSettings = Field(default_factory=RedisSettings)
	cache: CacheSettings = Field(default_factory=CacheSettings)
	chart: ChartSettings = Field(default_factory=ChartSettings)

	model_config = SettingsConfigDict(
		env_prefix="SCB_",
		case_sensitive=False,
		env_nested_delimiter="__",
		env_file=".env",
		env_file_encoding="utf-8",
	)


settings = Settings()
