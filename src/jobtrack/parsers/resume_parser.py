import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from jobtrack.models.resume import ResumeData


def load_base_resume(file_path: str | Path) -> ResumeData:
    """Load a structured base resume from a JSON or YAML file."""
    path = Path(file_path)
    suffix = path.suffix.lower()
    raw = path.read_text(encoding="utf-8")
    if suffix == ".json":
        data = json.loads(raw)
    elif suffix in (".yaml", ".yml"):
        data = yaml.safe_load(raw)
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")

    if not isinstance(data, dict):
        raise ValueError(f"Resume file must contain an object, got {type(data).__name__}")
    try:
        return ResumeData.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid resume file {path.name}: {e}") from e
