import dataclasses, html
from typing import Any, Dict, List

SECRET_FIELD_SUFFIXES = ("_KEY", "_SECRET", "_TOKEN", "_PASSWORD")

def format_config_for_displaying(config_obj) -> Dict[str, Any]:
  """Config dataclass as display dict. Secrets only show whether they are configured."""
  result = {}
  for field in dataclasses.fields(config_obj):
    value = getattr(config_obj, field.name)
    if field.name.endswith(SECRET_FIELD_SUFFIXES): result[field.name] = "✅ [CONFIGURED]" if value else "⚠️ [NOT CONFIGURED]"
    elif value is None or value == "": result[field.name] = "⚠️ [NOT CONFIGURED]"
    else: result[field.name] = "✅ " + str(value)
  return result

def flatten_record(record: Dict[str, Any], parent_key: str = "") -> Dict[str, Any]:
  """
  Flatten nested dicts into dotted keys: {"location": {"latitude": 1}} -> {"location.latitude": 1}.
  Lists are kept as values.
  """
  result = {}
  for key, value in record.items():
    full_key = f"{parent_key}.{key}" if parent_key else str(key)
    if isinstance(value, dict) and value: result.update(flatten_record(value, full_key))
    else: result[full_key] = value
  return result

def _collect_keys(items: List[Dict[str, Any]]) -> List[str]:
  # Union of all keys, in order of first appearance
  all_keys = []
  seen_keys = set()
  for item in items:
    for key in item.keys():
      if key not in seen_keys:
        all_keys.append(key)
        seen_keys.add(key)
  return all_keys

def convert_to_flat_html_table(data: Any) -> str:
  if not data: return "<p>No data</p>"

  # List of records (backend items, initialization_errors)
  if isinstance(data, list):
    if all(isinstance(item, dict) for item in data):
      items = [flatten_record(item) for item in data]
      all_keys = _collect_keys(items)
      if all_keys:
        header_row = "".join(f"<th>{html.escape(str(key))}</th>" for key in all_keys)
        rows = []
        for item in items:
          cells = [f"<td>{html.escape(str(item.get(key, '')))}</td>" for key in all_keys]
          rows.append(f"<tr>{''.join(cells)}</tr>")
        return f"<table border=1><tr>{header_row}</tr>{''.join(rows)}</table>"

    # Simple list or mixed content
    rows = [f"<tr><td>[{i}]</td><td>{html.escape(str(item))}</td></tr>" for i, item in enumerate(data)]
    return f"<table border=1><tr><th>Index</th><th>Value</th></tr>{''.join(rows)}</table>"

  # Single record or config: key-value table
  if isinstance(data, dict):
    rows = [f"<tr><td>{html.escape(str(k))}</td><td>{html.escape(str(v))}</td></tr>" for k, v in flatten_record(data).items()]
    return f"<table border=1><tr><th>Key</th><th>Value</th></tr>{''.join(rows)}</table>"

  return f"<table border=1><tr><th>Value</th></tr><tr><td>{html.escape(str(data))}</td></tr></table>"
