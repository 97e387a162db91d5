# ayalon_skill/infra/yaml_io.py
from pathlib import Path
from typing import Any
import yaml

def load_yaml(path: Path) -> Any:
    """Load a YAML file and return the Python object."""
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

def save_yaml(path: Path, data: Any) -> None:
    """Dump a Python object to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
