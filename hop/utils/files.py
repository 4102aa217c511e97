import json
import pathlib
from typing import Any

def load_json(path: pathlib.Path, default: Any) -> Any:
    """Load JSON safely.
    If file is missing or invalid JSON, return default.
    """
    try:
        if not path.exists():
            return default
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return default
