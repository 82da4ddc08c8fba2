"""Front matter extraction."""

import json
from typing import Any

import yaml

_OPEN = "---\n"
_CLOSE = "\n---\n"


def extract_frontmatter(content: str) -> dict[str, Any]:
    """Parse a leading `---` YAML block into a JSON-safe dict. Empty when absent or invalid."""
    content = content.replace("\r\n", "\n")
    if not content.startswith(_OPEN):
        return {}
    end = content.find(_CLOSE, len(_OPEN) - 1)
    if end == -1:
        return {}
    block = content[len(_OPEN) : end]
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError:
        return {}
    if not isinstance(data, dict):
        return {}
    # Dates and other YAML scalars become strings so the result fits in JSONB.
    return json.loads(json.dumps({str(k): v for k, v in data.items()}, default=str))
