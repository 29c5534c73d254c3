import json
from pathlib import Path
from typing import Any, Union

import yaml


def from_json_or_yaml(file_path: Union[str, Path]) -> Any:
    """
    Load a JSON or YAML file, picking the parser from the file extension.

    Args:
    file_path (str | Path): Path to a .json, .yaml or .yml file.

    Returns:
    The parsed content.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as handle:
        if suffix == ".json":
            return json.load(handle)
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(handle)
    raise ValueError(f"Unsupported file type: {path} (expected .json, .yaml or .yml)")
