import json
import logging
from typing import Any, List, Optional, Sequence, Tuple

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.core.config import settings


class GoogleSheetsClient:
	"""
	最小实现：Service Account 鉴权 + Sheets v4 values.batchGet。
	凭据来自 `settings.google`，若缺失将抛出异常。
	"""

	def __init__(
		self,
		credentials_file: Optional[str] = None,
		credentials_json: Optional[str] = None,
		scopes: Optional[List[str]] = None,
	) -> None:
		self._logger = logging.getLogger("scb.google")
		scopes = scopes or settings.google.scopes
		creds = self._load_credentials(
			credentials_file or settings.google.credentials_file,
			credentials_json or settings.google.credentials_json,
			scopes,
		)
		self.service = build("sheets", "v4", credentials=creds, cache_discovery=False)

	def _load_credentials(
		self,
		credentials_file: Optional[str],
		credentials_json: Optional[str],
		scopes: List[str],
	):
		# 1) JSON 内容优先
		if credentials_json:
			try:
				info = json.loads(credentials_json)
			except json.JSONDecodeError as e:
				raise ValueError(f"SCB_GOOGLE__CREDENTIALS_JSON 不是合法 JSON: {e}") from e
			return service_account.Credentials.from_service_account_info(info, scopes=scopes)
		# 2) JSON 文件
		if credentials_file:
			try:
				return service_account.Credentials.from_service_account_file(credentials_file, scopes=scopes)
			except OSError as e:
				raise ValueError(f"无法读取凭据文件 {credentials_file}: {e}") from e
		raise ValueError(
			"Google credentials missing: configure SCB_GOOGLE__CREDENTIALS_FILE or SCB_GOOGLE__CREDENTIALS_JSON"
		)

	# ---------- Sheets v4：一次读取多个范围 ----------
	def batch_get_values(
		self,
		spreadsheet_id: str,
		ranges: Sequence[str],
		value_render_option: str = "FORMATTED_VALUE",
		major_dimension: str = "ROWS",
	) -> List[Tuple[str, List[List[Any]]]]:
		"""返回 [(回显范围, 二维数组), ...]，顺序与数据源一致"""
		self._logger.debug(f"准备批量读取: spreadsheet_id={spreadsheet_id}, ranges={list(ranges)}")

		request = self.service.spreadsheets().values().batchGet(
			spreadsheetId=spreadsheet_id,
			ranges=list(ranges),
			valueRenderOption=value_render_option,
			majorDimension=major_dimension,
		)
		try:
			body = request.execute()
		except HttpError as e:
			status = getattr(e, "status_code", None) or getattr(getattr(e, "resp", None), "status", None)
			self._logger.error(
				f"spreadsheets.values.batchGet failed, status: {status}, spreadsheet_id: {spreadsheet_id}, reason: {e}"
			)
			raise RuntimeError(f"batchGet failed: status={status} {e}") from e

		value_ranges = (body or {}).get("valueRanges", []) or []
		pairs = [(vr.get("range", ""), vr.get("values", []) or []) for vr in value_ranges]
		self._logger.debug(f"批量读取完成，返回范围数: {len(pairs)}")
		return pairs
