# Common UI Functions V2 - HTML rendering of table and pagination render trees for V2 routers
# Render trees come from common_table_functions_v2.py and common_pagination_functions_v2.py.
# In server-rendered pages click handlers return navigation targets (URLs); a string result becomes a link.

import html, re
from typing import Any, Callable, Dict, List, Optional

from fastapi.responses import HTMLResponse, JSONResponse

from common_utility_functions import convert_to_flat_html_table
from hardcoded_config import TABLE_HARDCODED_CONFIG
from routers_v2.common_pagination_functions_v2 import PageButton, PaginationControl
from routers_v2.common_table_functions_v2 import CellContent, TableRenderTree, TableRow

# ----------------------------------------- START: Internal Helpers ----------------------------------------------------------

class RawHtml(str):
  """Trusted HTML produced by custom cells (badges, action buttons). Rendered without escaping."""

def _escape_html(text: Any) -> str:
  """Escape HTML special characters."""
  return html.escape(str(text)) if text is not None and text != "" else ""

def _sanitize_row_id(item_id: str) -> str:
  """Sanitize row ID to alphanumeric + underscore only."""
  return re.sub(r'[^a-zA-Z0-9_]', '_', str(item_id))

def _style_attr(min_width: Optional[str], max_width: Optional[str], no_wrap: bool = False) -> str:
  styles = []
  if min_width: styles.append(f"min-width: {min_width}")
  if max_width: styles.append(f"max-width: {max_width}")
  if no_wrap: styles.append("white-space: nowrap")
  return f' style="{_escape_html("; ".join(styles))}"' if styles else ""

def _class_attr(*class_names: str) -> str:
  joined = " ".join(c for c in class_names if c)
  return f' class="{_escape_html(joined)}"' if joined else ""

def _navigation_target(handler: Optional[Callable[[], Any]]) -> Optional[str]:
  """Invoke a click handler; only string results are usable as link targets."""
  if handler is None: return None
  target = handler()
  return target if isinstance(target, str) and target else None

def generate_button(btn: Dict, router_prefix: str, item_id: Optional[str]) -> str:
  """Generate a single button (or link when 'href' is set) with {itemId} and {router_prefix} placeholders replaced."""
  text = btn.get("text", "")
  btn_class = btn.get("class", "btn-small")
  item_id = str(item_id) if item_id is not None else None

  if "href" in btn:
    href = btn["href"].replace("{router_prefix}", router_prefix)
    if item_id: href = href.replace("{itemId}", item_id)
    return f'<a class="{btn_class}" href="{_escape_html(href)}" onclick="event.stopPropagation()">{_escape_html(text)}</a>'

  attrs = [f'class="{btn_class}"']
  onclick = btn.get("onclick", "")
  confirm_msg = btn.get("confirm_message", "")
  if onclick:
    if item_id: onclick = onclick.replace("{itemId}", item_id)
    if confirm_msg:
      confirm_escaped = confirm_msg.replace("{itemId}", item_id or "").replace("'", "\\'")
      onclick = f"if(confirm('{confirm_escaped}')) {{ {onclick} }}"
    attrs.append(f'onclick="event.stopPropagation(); {_escape_html(onclick)}"')
  return f'<button {" ".join(attrs)}>{_escape_html(text)}</button>'

# ----------------------------------------- END: Internal Helpers ------------------------------------------------------------


# ----------------------------------------- START: Response Helpers ----------------------------------------------------------

def json_result(ok: bool, error: str, data: Any) -> JSONResponse:
  """Generate consistent JSON response: {ok, error, data}."""
  status_code = 200 if ok else 400
  return JSONResponse({"ok": ok, "error": error, "data": data}, status_code=status_code)

def html_result(title: str, data: Any, navigation_html: str = "") -> HTMLResponse:
  """
  Generate simple HTML page with data table.

  Args:
    title: Page title
    data: Data to display in table
    navigation_html: Raw HTML for navigation links (e.g., '<a href="...">Back</a> | <a href="/">Back to Main Page</a>')
  """
  table_html = convert_to_flat_html_table(data) if data else '<p>No data</p>'
  return HTMLResponse(f"""<!doctype html><html lang="en">
{generate_html_head(title, include_htmx=False)}
<body>
  <h1>{_escape_html(title)}</h1>
  {navigation_html}
  {table_html}
</body>
</html>""")

# ----------------------------------------- END: Response Helpers ------------------------------------------------------------


# ----------------------------------------- START: Component Generators ------------------------------------------------------

TABLE_CSS = """
body { font-family: system-ui, sans-serif; margin: 1.5rem; }
table.data-table { border-collapse: collapse; width: 100%; }
table.data-table th, table.data-table td { border-bottom: 1px solid #e5e7eb; padding: 0.5rem 0.75rem; text-align: left; }
table.data-table td .truncate { overflow: hidden; text-overflow: ellipsis; white-space: nowrap; }
table.data-table td .has-tooltip { cursor: help; }
tr.clickable-row { cursor: pointer; }
tr.clickable-row:hover { background: #f3f4f6; }
td.placeholder-cell { height: 10rem; text-align: center; color: #6b7280; }
.spinner { display: inline-block; width: 1.5rem; height: 1.5rem; border: 3px solid #d1d5db; border-top-color: #2563eb; border-radius: 50%; animation: spin 1s linear infinite; }
@keyframes spin { to { transform: rotate(360deg); } }
.pagination { display: flex; flex-wrap: wrap; align-items: center; justify-content: space-between; gap: 0.5rem; margin-top: 1rem; }
.pagination .page-nav { display: flex; align-items: center; gap: 0.25rem; }
.pagination .page-btn { min-width: 2rem; padding: 0.25rem 0.5rem; border: 1px solid #d1d5db; border-radius: 0.375rem; background: #fff; text-decoration: none; color: inherit; }
.pagination .page-btn.current { background: #2563eb; border-color: #2563eb; color: #fff; }
.pagination .page-btn[disabled] { opacity: 0.5; cursor: not-allowed; }
.pagination .page-ellipsis { min-width: 2rem; text-align: center; }
.pagination .range-summary { color: #6b7280; font-size: 0.875rem; }
@media (max-width: 640px) { .pagination .page-numbers { display: none; } }
.status-badge { display: inline-flex; align-items: center; border-radius: 9999px; border: 1px solid; padding: 0.1rem 0.6rem; font-size: 0.85rem; }
.status-success { background: #dcfce7; color: #166534; border-color: #bbf7d0; }
.status-warning { background: #fef9c3; color: #854d0e; border-color: #fef08a; }
.status-danger { background: #fee2e2; color: #991b1b; border-color: #fecaca; }
.status-info { background: #dbeafe; color: #1e40af; border-color: #bfdbfe; }
.status-neutral { background: #f3f4f6; color: #1f2937; border-color: #e5e7eb; }
"""

def generate_html_head(title: str, include_htmx: bool = True, additional_css: str = "") -> str:
  """Generate <head> section with table styles and optional htmx."""
  htmx_script = f'<script src="{TABLE_HARDCODED_CONFIG.HTMX_SCRIPT_URL}"></script>' if include_htmx else ''
  return f"""<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{_escape_html(title)}</title>
  <style>{TABLE_CSS}{additional_css}</style>
  {htmx_script}
</head>"""

def generate_status_badge(status: str, variant: str = "neutral", label: Optional[str] = None) -> RawHtml:
  """Pill-shaped status label. variant is one of success, warning, danger, info, neutral."""
  return RawHtml(f'<span class="status-badge status-{_escape_html(variant)}">{_escape_html(label or status)}</span>')

def generate_cell_content(content: Any) -> str:
  """Render the output of render_cell(): CellContent, trusted RawHtml, or any value (escaped)."""
  if content is None: return ""
  if isinstance(content, RawHtml): return str(content)
  if isinstance(content, CellContent):
    classes = "truncate has-tooltip" if content.tooltip else ("truncate" if content.truncate else "")
    title = f' title="{_escape_html(content.tooltip)}"' if content.tooltip else ""
    return f'<div{_class_attr(classes)}{title}>{_escape_html(content.text)}</div>'
  return _escape_html(content)

def generate_table_row(row: TableRow) -> str:
  """
  Generate single table row. Interactive rows navigate to the target returned by their click handler.

  The click handler is called once while rendering to obtain the link target, without any user action.
  Handlers must be free of side effects and only return a URL.
  """
  cells = []
  for cell in row.cells:
    cells.append(f'<td{_class_attr(cell.class_name)}{_style_attr(cell.min_width, cell.max_width, cell.no_wrap)}>{generate_cell_content(cell.content)}</td>')

  click_attrs = ""
  row_classes = [row.class_name]
  if row.interactive:
    row_classes.append("clickable-row")
    href = _navigation_target(row.on_click)
    if href:
      click_attrs = f' data-href="{_escape_html(href)}" onclick="window.location=this.dataset.href"'

  return f'<tr id="row-{_sanitize_row_id(row.key)}" data-key="{_escape_html(row.key)}"{_class_attr(*row_classes)}{click_attrs}>{"".join(cells)}</tr>'

def generate_table(tree: TableRenderTree, table_id: str = "data-table") -> str:
  """Generate table with header row and body for the tree's state (loading, empty, populated)."""
  header_cells = [f'<th{_class_attr(h.class_name)}{_style_attr(h.min_width, h.max_width)}>{_escape_html(h.text)}</th>' for h in tree.headers]

  if tree.placeholder is not None:
    spinner = '<div class="spinner" role="status" aria-label="Loading"></div>' if tree.placeholder.busy else ""
    body_html = f'<tr class="placeholder-row state-{tree.state.value}"><td colspan="{tree.placeholder.col_span}" class="placeholder-cell">{spinner}<p>{_escape_html(tree.placeholder.message)}</p></td></tr>'
  else:
    body_html = "".join(generate_table_row(row) for row in tree.rows)

  return f"""<table id="{_escape_html(table_id)}" class="data-table" data-state="{tree.state.value}">
      <thead><tr>{"".join(header_cells)}</tr></thead>
      <tbody>{body_html}</tbody>
    </table>"""

def _generate_page_button(button: PageButton) -> str:
  if button.kind == "ellipsis":
    return '<span class="page-ellipsis" aria-hidden="true">...</span>'
  classes = "page-btn current" if button.is_current else "page-btn"
  aria = ' aria-current="page"' if button.is_current else ""
  label = _escape_html(button.label)
  if button.disabled:
    return f'<button class="{classes} page-{button.kind}" disabled>{label}</button>'
  href = _navigation_target(button.on_click)
  if href:
    return f'<a class="{classes} page-{button.kind}" href="{_escape_html(href)}" data-page="{button.page}"{aria}>{label}</a>'
  return f'<button class="{classes} page-{button.kind}" data-page="{button.page}"{aria}>{label}</button>'

def generate_pagination(control: Optional[PaginationControl]) -> str:
  """
  Generate pagination bar: First/Previous, windowed page numbers, Next/Last, range summary, page-size selector.

  The page-size handler is called once per option while rendering to obtain the option URLs, without any
  user action. Handlers must be free of side effects and only return a URL.
  """
  if control is None: return ""

  nav_parts = []
  if control.first_button: nav_parts.append(_generate_page_button(control.first_button))
  nav_parts.append(_generate_page_button(control.previous_button))
  nav_parts.append(f'<span class="page-numbers">{"".join(_generate_page_button(b) for b in control.page_buttons)}</span>')
  nav_parts.append(_generate_page_button(control.next_button))
  if control.last_button: nav_parts.append(_generate_page_button(control.last_button))

  summary_html = f'<div class="range-summary">{_escape_html(control.range_summary)}</div>' if control.range_summary else ""

  selector_html = ""
  if control.page_size_selector:
    selector = control.page_size_selector
    options = []
    for size in selector.options:
      target = selector.on_change(size)
      value = target if isinstance(target, str) else str(size)
      selected = " selected" if size == selector.selected else ""
      options.append(f'<option value="{_escape_html(value)}"{selected}>{size}</option>')
    selector_html = f'<div class="page-size"><span>Show</span> <select onchange="window.location=this.value">{"".join(options)}</select> <span>per page</span></div>'

  return f"""<div class="pagination">
      <div class="page-nav">{"".join(nav_parts)}</div>
      {summary_html}
      {selector_html}
    </div>"""

def generate_table_fragment(tree: TableRenderTree, table_id: str = "data-table") -> str:
  """Table plus pagination bar, wrapped so htmx can swap it as one unit."""
  return f'<div id="{_escape_html(table_id)}-container">{generate_table(tree, table_id)}{generate_pagination(tree.pagination)}</div>'

def generate_search_form(action_url: str, search_value: str = "", placeholder: str = "Search...") -> str:
  """GET form that reloads the list page with a search term (page reset to 1)."""
  return f"""<form class="toolbar" method="get" action="{_escape_html(action_url)}">
      <input type="hidden" name="format" value="ui">
      <input type="search" name="search" value="{_escape_html(search_value)}" placeholder="{_escape_html(placeholder)}">
      <button type="submit" class="btn-small">Search</button>
    </form>"""

# ----------------------------------------- END: Component Generators --------------------------------------------------------


# ----------------------------------------- START: High-Level Page Generators ------------------------------------------------

def generate_list_page(
  title: str,
  loading_tree: TableRenderTree,
  fragment_url: str,
  navigation_html: str = "",
  search_html: str = "",
  table_id: str = "data-table",
  additional_css: str = ""
) -> str:
  """
  Generate list page whose table starts in the loading state and swaps in the rendered fragment via htmx.

  Args:
    title: Page title
    loading_tree: Table render tree in LOADING state (headers + busy row)
    fragment_url: Endpoint returning the populated table fragment
    navigation_html: Raw HTML for navigation links
    search_html: Raw HTML for the search form
    table_id: DOM id of the table
    additional_css: Extra CSS
  """
  nav_html = f'<p>{navigation_html}</p>' if navigation_html else ""
  return f"""<!doctype html><html lang="en">
{generate_html_head(title, include_htmx=True, additional_css=additional_css)}
<body>
  <div class="container">
    <h1>{_escape_html(title)}</h1>
    {nav_html}
    {search_html}
    <div id="{_escape_html(table_id)}-container" hx-get="{_escape_html(fragment_url)}" hx-trigger="load" hx-swap="outerHTML">
      {generate_table(loading_tree, table_id)}
    </div>
  </div>
</body>
</html>"""

def generate_router_docs_page(title: str, description: str, router_prefix: str, endpoints: List[Dict], navigation_html: str = "") -> str:
  """
  Generate router root documentation page (HTML).

  Args:
    title: Router title
    description: Router description
    router_prefix: API prefix
    endpoints: List of endpoint configs [{"path": "/get", "desc": "Get item", "formats": ["json", "html"]}]
    navigation_html: Raw HTML for navigation links (e.g., '<a href="/">Back to Main Page</a>')
  """
  endpoints_html = []
  for ep in endpoints:
    path = ep.get("path", "")
    desc = ep.get("desc", "")
    formats = ep.get("formats", [])

    full_path = f"{router_prefix}{path}"
    format_links = [f'<a href="{full_path}?format={fmt}">{fmt}</a>' for fmt in formats]
    format_html = f" ({' | '.join(format_links)})" if format_links else ""

    endpoints_html.append(f'<li><a href="{_escape_html(full_path)}">{_escape_html(full_path)}</a> - {_escape_html(desc)}{format_html}</li>')

  return f"""<!doctype html><html lang="en">
{generate_html_head(title, include_htmx=False)}
<body>
  <h1>{_escape_html(title)}</h1>
  {navigation_html}
  <p>{_escape_html(description)}</p>

  <h4>Available Endpoints</h4>
  <ul>
    {"".join(endpoints_html)}
  </ul>
</body>
</html>"""

# ----------------------------------------- END: High-Level Page Generators --------------------------------------------------
