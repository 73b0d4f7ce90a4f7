# Common Table Functions V2 - Generic table render trees for list screens
# Maps arbitrary records to rows via declarative column descriptors. Pure functions: no I/O, no logging.

import datetime, inspect
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Union

from hardcoded_config import TABLE_HARDCODED_CONFIG
from routers_v2.common_pagination_functions_v2 import PaginationControl, build_pagination_control


# ----------------------------------------- START: Types ---------------------------------------------------------------------

class TableState(Enum):
  LOADING = "loading"
  EMPTY = "empty"
  POPULATED = "populated"

@dataclass
class Column:
  """Column descriptor. If cell is set it receives the whole record and wins over accessor_key."""
  header: str
  accessor_key: str
  cell: Optional[Callable[[Any], Any]] = None
  class_name: str = ""
  enable_tooltip: bool = False
  min_width: Optional[str] = None
  max_width: Optional[str] = None

@dataclass
class CellContent:
  text: str
  tooltip: Optional[str] = None
  truncate: bool = True

@dataclass
class TableHeaderCell:
  text: str
  class_name: str = ""
  min_width: Optional[str] = None
  max_width: Optional[str] = None

@dataclass
class TableCell:
  content: Any
  class_name: str = ""
  min_width: Optional[str] = None
  max_width: Optional[str] = None
  no_wrap: bool = True

@dataclass
class TableRow:
  key: str
  cells: List[TableCell]
  class_name: str = ""
  interactive: bool = False
  on_click: Optional[Callable[[], Any]] = None

@dataclass
class TablePlaceholderRow:
  message: str
  col_span: int
  busy: bool = False

@dataclass
class TablePagination:
  current_page: int
  total_pages: int
  on_page_change: Callable[[int], Any]
  total_items: Optional[int] = None
  page_size: Optional[int] = None
  on_page_size_change: Optional[Callable[[int], Any]] = None
  page_size_options: Optional[List[int]] = None
  sibling_count: int = TABLE_HARDCODED_CONFIG.DEFAULT_SIBLING_COUNT
  show_first_last: bool = False

@dataclass
class TableRenderTree:
  state: TableState
  headers: List[TableHeaderCell]
  rows: List[TableRow] = field(default_factory=list)
  placeholder: Optional[TablePlaceholderRow] = None
  pagination: Optional[PaginationControl] = None

KeyField = Union[str, Callable[[Any], Optional[str]]]
RowClassName = Union[str, Callable[..., str], None]

# ----------------------------------------- END: Types -----------------------------------------------------------------------


# ----------------------------------------- START: Accessor Resolver ---------------------------------------------------------

def _get_field(value: Any, key: str) -> Any:
  """Single-step key access on mappings, sequences (integer keys) and objects. Missing -> None."""
  if value is None: return None
  if isinstance(value, Mapping): return value.get(key)
  if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
    if not key.isdecimal(): return None
    index = int(key)
    return value[index] if index < len(value) else None
  return getattr(value, key, None)

def resolve_accessor_path(record: Any, path: str) -> Any:
  """
  Resolve a dotted field path like 'user.name' against a record.

  Returns None as soon as an intermediate value is None or a segment does not exist.
  Never raises for missing or malformed paths.
  """
  path = str(path)
  if "." not in path:
    return _get_field(record, path)
  value = record
  for segment in path.split("."):
    value = _get_field(value, segment)
    if value is None: return None
  return value

# ----------------------------------------- END: Accessor Resolver -----------------------------------------------------------


# ----------------------------------------- START: Cell Renderer -------------------------------------------------------------

def format_display_value(value: Any) -> str:
  """Convert a resolved value into display text. None becomes the 'N/A' sentinel."""
  if value is None: return TABLE_HARDCODED_CONFIG.MISSING_VALUE_SENTINEL
  if isinstance(value, str): return value
  if isinstance(value, bool): return "Yes" if value else "No"
  if isinstance(value, (datetime.date, datetime.datetime)): return value.isoformat()
  return str(value)

def render_cell(row: Any, column: Column) -> Any:
  """Custom cell output is returned verbatim; otherwise accessor-based CellContent."""
  if column.cell is not None:
    return column.cell(row)

  value = resolve_accessor_path(row, column.accessor_key)
  text = format_display_value(value)
  # Only textual values get the hover affordance; the sentinel counts as text
  is_textual = value is None or isinstance(value, str)
  tooltip = text if column.enable_tooltip and is_textual else None
  return CellContent(text=text, tooltip=tooltip)

# ----------------------------------------- END: Cell Renderer ---------------------------------------------------------------


# ----------------------------------------- START: Row Helpers ---------------------------------------------------------------

def get_row_key(row: Any, index: int, key_field: KeyField) -> str:
  """Row identity from a field name or a function; None falls back to 'row-<index>'."""
  key = key_field(row) if callable(key_field) else resolve_accessor_path(row, key_field)
  if key is None: return f"{TABLE_HARDCODED_CONFIG.SYNTHETIC_ROW_KEY_PREFIX}{index}"
  return str(key)

def _accepts_index(func: Callable[..., Any]) -> bool:
  try: params = inspect.signature(func).parameters.values()
  except (TypeError, ValueError): return False
  if any(p.kind == inspect.Parameter.VAR_POSITIONAL for p in params): return True
  positional = [p for p in params if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)]
  return len(positional) >= 2

def get_row_class_name(row: Any, index: int, row_class_name: RowClassName) -> str:
  """Static class string, or the result of row_class_name(row, index) / row_class_name(row)."""
  if row_class_name is None: return ""
  if callable(row_class_name):
    result = row_class_name(row, index) if _accepts_index(row_class_name) else row_class_name(row)
    return result or ""
  return row_class_name

def _row_click_handler(on_row_click: Callable[[Any], Any], row: Any) -> Callable[[], Any]:
  return lambda: on_row_click(row)

# ----------------------------------------- END: Row Helpers -----------------------------------------------------------------


# ----------------------------------------- START: Table Renderer ------------------------------------------------------------

def render_table(
  columns: List[Column],
  data: Optional[List[Any]],
  key_field: KeyField,
  is_loading: bool = False,
  empty_message: Optional[str] = None,
  row_class_name: RowClassName = None,
  on_row_click: Optional[Callable[[Any], Any]] = None,
  pagination: Optional[TablePagination] = None
) -> TableRenderTree:
  """
  Render a table into a TableRenderTree.

  State priority on every call:
    1. LOADING   - is_loading is True, whatever data holds (no empty-state flash during a refetch)
    2. EMPTY     - no records
    3. POPULATED - one row per record, cells in declared column order

  The header row is always present. The pagination control is only attached in the POPULATED state.

  Args:
    columns: Column descriptors
    data: Records of any shape (dicts, dataclasses, objects)
    key_field: Field name or function yielding a unique key per row
    is_loading: Show the loading placeholder
    empty_message: Text for the empty state (default 'No data available')
    row_class_name: Static class or function of (row, index) / (row)
    on_row_click: If set, rows become interactive and carry a click handler
    pagination: Pagination props passed to the pagination control
  """
  headers = [TableHeaderCell(text=c.header, class_name=c.class_name, min_width=c.min_width, max_width=c.max_width) for c in columns]
  col_span = max(len(columns), 1)

  if is_loading:
    return TableRenderTree(
      state=TableState.LOADING,
      headers=headers,
      placeholder=TablePlaceholderRow(message=TABLE_HARDCODED_CONFIG.LOADING_MESSAGE, col_span=col_span, busy=True)
    )

  if not data:
    return TableRenderTree(
      state=TableState.EMPTY,
      headers=headers,
      placeholder=TablePlaceholderRow(message=empty_message or TABLE_HARDCODED_CONFIG.DEFAULT_EMPTY_MESSAGE, col_span=col_span)
    )

  rows: List[TableRow] = []
  for index, row in enumerate(data):
    cells = [
      TableCell(content=render_cell(row, column), class_name=column.class_name, min_width=column.min_width, max_width=column.max_width)
      for column in columns
    ]
    rows.append(TableRow(
      key=get_row_key(row, index, key_field),
      cells=cells,
      class_name=get_row_class_name(row, index, row_class_name),
      interactive=on_row_click is not None,
      on_click=_row_click_handler(on_row_click, row) if on_row_click else None
    ))

  control = None
  if pagination is not None:
    control = build_pagination_control(
      current_page=pagination.current_page,
      total_pages=pagination.total_pages,
      on_page_change=pagination.on_page_change,
      total_items=pagination.total_items,
      page_size=pagination.page_size,
      sibling_count=pagination.sibling_count,
      on_page_size_change=pagination.on_page_size_change,
      page_size_options=pagination.page_size_options,
      show_first_last=pagination.show_first_last
    )

  return TableRenderTree(state=TableState.POPULATED, headers=headers, rows=rows, pagination=control)

# ----------------------------------------- END: Table Renderer --------------------------------------------------------------
