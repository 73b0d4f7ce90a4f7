from dataclasses import dataclass
from typing import List

@dataclass
class TableHardcodedConfig:
  MISSING_VALUE_SENTINEL: str
  ELLIPSIS_TOKEN: str
  DEFAULT_EMPTY_MESSAGE: str
  LOADING_MESSAGE: str
  DEFAULT_PAGE_SIZE: int
  DEFAULT_SIBLING_COUNT: int
  DEFAULT_PAGE_SIZE_OPTIONS: List[int]
  SYNTHETIC_ROW_KEY_PREFIX: str
  HTMX_SCRIPT_URL: str
  BACKEND_CHARGERS_PATH: str
  BACKEND_SESSIONS_PATH: str


TABLE_HARDCODED_CONFIG = TableHardcodedConfig(
  MISSING_VALUE_SENTINEL="N/A"
  ,ELLIPSIS_TOKEN="ellipsis"
  ,DEFAULT_EMPTY_MESSAGE="No data available"
  ,LOADING_MESSAGE="Loading data..."
  ,DEFAULT_PAGE_SIZE=10
  ,DEFAULT_SIBLING_COUNT=1
  ,DEFAULT_PAGE_SIZE_OPTIONS=[10, 25, 50, 100]
  ,SYNTHETIC_ROW_KEY_PREFIX="row-"
  ,HTMX_SCRIPT_URL="https://unpkg.com/htmx.org@1.9.12"
  # Django REST endpoints of the charging platform backend
  ,BACKEND_CHARGERS_PATH="/api/ocpp/chargers/"
  ,BACKEND_SESSIONS_PATH="/api/ocpp/charging-sessions/"
)
