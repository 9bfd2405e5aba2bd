import re
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Optional

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")
_API_PREFIX = "/api"
_VERSION_SEGMENT = re.compile(r"^/v\d+(?:\.\d+)?(?=/|$)")


def _version_parts(version: str) -> List[int]:
    parts: List[int] = []
    for segment in version.split("."):
        m = _LEADING_INT.match(segment)
        parts.append(int(m.group(0)) if m else 0)
    return parts


def compare_versions(a: str, b: str) -> int:
    """
    Compare dotted numeric versions segment by segment.

    Missing segments count as 0, so "1.2" and "1.2.0" compare equal.
    Returns a negative number, zero or a positive number like ``cmp``.
    """
    pa = _version_parts(a)
    pb = _version_parts(b)
    for i in range(max(len(pa), len(pb))):
        va = pa[i] if i < len(pa) else 0
        vb = pb[i] if i < len(pb) else 0
        if va != vb:
            return -1 if va < vb else 1
    return 0


def sort_versions_desc(versions: Iterable[str]) -> List[str]:
    """Newest first; equal versions keep their input order."""
    return sorted(versions, key=cmp_to_key(compare_versions), reverse=True)


def normalize_path(path: str) -> str:
    """
    Reduce a request path to the form the route table is written against.

    Trailing slashes go, then leading `/api` and protocol version segments
    (`/v1`, `/v1.9`) are stripped until none remain, so the result is a
    fixed point: normalising it again returns it unchanged.
    """
    path = path.rstrip("/") or "/"
    while True:
        if path == _API_PREFIX or path.startswith(_API_PREFIX + "/"):
            stripped = path[len(_API_PREFIX):] or "/"
        else:
            stripped = _VERSION_SEGMENT.sub("", path, count=1) or "/"
        if stripped == path:
            return path
        path = stripped


def put_if_present(target: Dict[str, Any], key: str, value: Any) -> None:
    """Set ``target[key]`` only when ``value`` is present (not None)."""
    if value is not None:
        target[key] = value


def _wildcard_matches(value: str, keyword: str) -> bool:
    pattern = "^" + re.escape(keyword).replace(r"\*", ".*").replace(r"\?", ".") + "$"
    return re.search(pattern, value, flags=re.IGNORECASE) is not None


def match_text(value: str, keyword: Optional[str], match_type: Optional[str]) -> bool:
    """
    Match one package field value against a search keyword.

    Only `Exact` is case-sensitive. Unknown match types, and the fuzzy
    variants this source cannot rank, behave like `Substring`.
    """
    if keyword is None:
        return False
    mode = (match_type or "").strip() or "Substring"

    if mode == "Exact":
        return value == keyword
    if mode == "Wildcard":
        return _wildcard_matches(value, keyword)

    folded_value = value.casefold()
    folded_keyword = keyword.casefold()
    if mode == "CaseInsensitive":
        return folded_value == folded_keyword
    if mode == "StartsWith":
        return folded_value.startswith(folded_keyword)
    return folded_keyword in folded_value
