"""JSON helpers for results and summaries."""
import json
from pathlib import Path
from typing import Any

import numpy as np


def _to_builtin(obj: Any) -> Any:
    """Convert numpy scalars and arrays so ``json`` can encode them."""
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def save_json(obj: Any, file_path: str, indent: int = 2):
    """Save object as JSON."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        json.dump(obj, f, indent=indent, default=_to_builtin)


def load_json(file_path: str) -> Any:
    """Load JSON file."""
    with open(file_path, 'r') as f:
        return json.load(f)
