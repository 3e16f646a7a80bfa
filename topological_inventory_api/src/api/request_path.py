from __future__ import annotations

import re
from typing import Dict, Optional

# /<version>/<collection>[/<id>[/<subcollection>]]
_REQUEST_PATH_PATTERN = re.compile(r"/(v\d+.\d+)/(\w+)(/([^/]+)(/(\w+))?)?")


# PUBLIC_INTERFACE
def request_path_parts(path: str) -> Dict[str, Optional[str]]:
    """
    Split a request path into its versioned collection parts.

    Returns an empty dict when the path is not a versioned API path, otherwise
    the keys full_version_string, primary_collection_name,
    primary_collection_id and subcollection_name (the last two may be None).
    """
    match = _REQUEST_PATH_PATTERN.search(path)
    if not match:
        return {}
    return {
        "full_version_string": match.group(1),
        "primary_collection_name": match.group(2),
        "primary_collection_id": match.group(4),
        "subcollection_name": match.group(6),
    }


# PUBLIC_INTERFACE
def is_subcollection(parts: Dict[str, Optional[str]]) -> bool:
    return bool(
        parts.get("primary_collection_name")
        and parts.get("primary_collection_id")
        and parts.get("subcollection_name")
    )
