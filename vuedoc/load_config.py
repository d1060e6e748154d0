"""Logic for loading and merging parser configuration files."""

import copy
from pathlib import Path
from typing import Any

import yaml

from vuedoc.deep_merge import deep_merge

DEFAULT_CONFIG: dict[str, Any] = {
    "parser": {
        "features": [
            "name",
            "description",
            "keywords",
            "model",
            "props",
            "data",
            "computed",
            "methods",
            "events",
            "slots",
        ],
        "ignored_visibilities": ["protected", "private"],
    },
    "source": {
        "encoding": "utf-8",
    },
}


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            config = deep_merge(config, user_config)
    return config
