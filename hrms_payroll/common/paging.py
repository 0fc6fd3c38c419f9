# hrms_payroll/common/paging.py
from flask import request

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

def page_limit(default_limit=DEFAULT_LIMIT, max_limit=MAX_LIMIT):
    try:
        page = max(int(request.args.get("page", DEFAULT_PAGE)), 1)
    except Exception:
        page = DEFAULT_PAGE
    try:
        limit = int(request.args.get("limit", default_limit))
        limit = max(1, min(limit, max_limit))
    except Exception:
        limit = default_limit
    return page, limit

def sort_order(allowed: dict[str, object], default: str = "created_at"):
    """
    allowed: {"created_at": Model.created_at, "net_salary": Model.net_salary, ...}
    ?sort=net_salary&order=asc  => (column, asc:bool)
    Unknown sort keys fall back to `default`; anything but "asc" sorts descending.
    """
    key = (request.args.get("sort") or default).strip()
    col = allowed.get(key)
    if col is None:
        col = allowed[default]
    asc = (request.args.get("order") or "desc").strip().lower() == "asc"
    return col, asc
