# Common Pagination Functions V2 - Page window calculation and pagination control render trees
# Pure functions: no I/O, no logging, no internal page state

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Union

from hardcoded_config import TABLE_HARDCODED_CONFIG

ELLIPSIS = TABLE_HARDCODED_CONFIG.ELLIPSIS_TOKEN

WindowToken = Union[int, str]


# ----------------------------------------- START: Render Tree Types ---------------------------------------------------------

@dataclass
class PageButton:
  kind: str  # "page", "ellipsis", "previous", "next", "first", "last"
  label: str
  page: Optional[int] = None
  is_current: bool = False
  disabled: bool = False
  on_click: Optional[Callable[[], Any]] = None

@dataclass
class PageSizeSelector:
  options: List[int]
  selected: int
  on_change: Callable[[int], Any]

@dataclass
class PaginationControl:
  current_page: int
  total_pages: int
  page_size: int
  previous_button: PageButton
  next_button: PageButton
  page_buttons: List[PageButton] = field(default_factory=list)
  first_button: Optional[PageButton] = None
  last_button: Optional[PageButton] = None
  range_summary: Optional[str] = None
  page_size_selector: Optional[PageSizeSelector] = None

# ----------------------------------------- END: Render Tree Types -----------------------------------------------------------


# ----------------------------------------- START: Normalization -------------------------------------------------------------

def _to_int(value: Any, default: int) -> int:
  if isinstance(value, bool): return default
  try: return int(value)
  except (TypeError, ValueError, OverflowError): return default

def normalize_total_pages(total_pages: Any) -> int:
  """Total pages is at least 1, non-numeric input counts as 1."""
  return max(_to_int(total_pages, 1), 1)

def clamp_current_page(current_page: Any, total_pages: Any) -> int:
  """Clamp current page into [1, total_pages] after normalizing total_pages."""
  total = normalize_total_pages(total_pages)
  return min(max(_to_int(current_page, 1), 1), total)

def normalize_page_size(page_size: Any) -> int:
  size = _to_int(page_size, TABLE_HARDCODED_CONFIG.DEFAULT_PAGE_SIZE)
  return size if size > 0 else TABLE_HARDCODED_CONFIG.DEFAULT_PAGE_SIZE

# ----------------------------------------- END: Normalization ---------------------------------------------------------------


# ----------------------------------------- START: Window Calculator ---------------------------------------------------------

def _page_range(start: int, end: int) -> List[int]:
  """Inclusive range, empty when end < start."""
  return list(range(start, end + 1))

def window_pages(current_page: int, total_pages: int, sibling_count: int = 1) -> List[WindowToken]:
  """
  Compute the page numbers and ellipsis markers a pagination bar shows.

  First page, last page, current page and sibling_count neighbors on each side stay visible.
  When total_pages fits into that span, every page is returned without ellipsis.

  Examples:
    window_pages(5, 10, 1)  -> [1, "ellipsis", 4, 5, 6, "ellipsis", 10]
    window_pages(1, 10, 1)  -> [1, 2, "ellipsis", 10]
    window_pages(10, 10, 1) -> [1, "ellipsis", 9, 10]
  """
  total = normalize_total_pages(total_pages)
  current = clamp_current_page(current_page, total)
  siblings = max(_to_int(sibling_count, TABLE_HARDCODED_CONFIG.DEFAULT_SIBLING_COUNT), 0)

  # first + last + current + siblings on both sides
  span = siblings * 2 + 3
  if total <= span:
    return _page_range(1, total)

  left_sibling = max(current - siblings, 1)
  right_sibling = min(current + siblings, total)
  show_left_ellipsis = left_sibling > 2
  show_right_ellipsis = right_sibling < total - 1

  # Near the edges the window is not padded: page 1 of 10 shows [1, 2, ..., 10]
  if not show_left_ellipsis and show_right_ellipsis:
    return _page_range(1, right_sibling) + [ELLIPSIS, total]

  if show_left_ellipsis and not show_right_ellipsis:
    return [1, ELLIPSIS] + _page_range(left_sibling, total)

  return [1, ELLIPSIS] + _page_range(left_sibling, right_sibling) + [ELLIPSIS, total]

# ----------------------------------------- END: Window Calculator -----------------------------------------------------------


# ----------------------------------------- START: Pagination Control --------------------------------------------------------

def format_item_range(current_page: int, page_size: int, total_items: int) -> str:
  """Summary text like 'Showing 11-20 of 25'."""
  total_items = max(_to_int(total_items, 0), 0)
  start = min((current_page - 1) * page_size + 1, total_items)
  end = min(current_page * page_size, total_items)
  return f"Showing {start}-{end} of {total_items}"

def _page_change_handler(on_page_change: Callable[[int], Any], page: int) -> Callable[[], Any]:
  return lambda: on_page_change(page)

def _nav_button(kind: str, label: str, target_page: int, disabled: bool, on_page_change: Callable[[int], Any]) -> PageButton:
  return PageButton(
    kind=kind,
    label=label,
    page=target_page,
    disabled=disabled,
    on_click=None if disabled else _page_change_handler(on_page_change, target_page)
  )

def build_pagination_control(
  current_page: int,
  total_pages: int,
  on_page_change: Callable[[int], Any],
  total_items: Optional[int] = None,
  page_size: Optional[int] = None,
  sibling_count: int = TABLE_HARDCODED_CONFIG.DEFAULT_SIBLING_COUNT,
  on_page_size_change: Optional[Callable[[int], Any]] = None,
  page_size_options: Optional[List[int]] = None,
  show_first_last: bool = False
) -> PaginationControl:
  """
  Build the render tree of a pagination bar.

  The control is fully controlled: it keeps no page state. Clicking a page button calls
  on_page_change(page) and returns its result; the caller re-supplies current_page on the next render.

  Args:
    current_page: Requested page, clamped into [1, total_pages]
    total_pages: Page count, normalized to at least 1
    on_page_change: Called with the target page when a button is clicked
    total_items: If given, a 'Showing start-end of total' summary is added
    page_size: Items per page for the summary and the selector (default 10)
    sibling_count: Neighbors shown on each side of the current page
    on_page_size_change: Called with the new size; page reset is left to the caller
    page_size_options: Sizes offered by the selector; selector only shown with on_page_size_change
    show_first_last: Add First/Last jump buttons
  """
  total = normalize_total_pages(total_pages)
  current = clamp_current_page(current_page, total)
  size = normalize_page_size(page_size)
  at_start = current <= 1
  at_end = current >= total

  page_buttons: List[PageButton] = []
  for token in window_pages(current, total, sibling_count):
    if token == ELLIPSIS:
      page_buttons.append(PageButton(kind="ellipsis", label="...", disabled=True))
    else:
      page_buttons.append(PageButton(
        kind="page",
        label=str(token),
        page=token,
        is_current=token == current,
        on_click=_page_change_handler(on_page_change, token)
      ))

  control = PaginationControl(
    current_page=current,
    total_pages=total,
    page_size=size,
    previous_button=_nav_button("previous", "Previous", current - 1, at_start, on_page_change),
    next_button=_nav_button("next", "Next", current + 1, at_end, on_page_change),
    page_buttons=page_buttons
  )

  if show_first_last:
    control.first_button = _nav_button("first", "First", 1, at_start, on_page_change)
    control.last_button = _nav_button("last", "Last", total, at_end, on_page_change)

  if total_items is not None:
    control.range_summary = format_item_range(current, size, total_items)

  if on_page_size_change and page_size_options:
    control.page_size_selector = PageSizeSelector(options=list(page_size_options), selected=size, on_change=on_page_size_change)

  return control

# ----------------------------------------- END: Pagination Control ----------------------------------------------------------
