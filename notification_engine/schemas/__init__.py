"""Reusable JSON Schemas for provider responses."""
from __future__ import annotations

from importlib import resources
import json
from functools import lru_cache
from typing import Any


@lru_cache(maxsize=None)
def load_priority_assessment_schema() -> dict[str, Any]:
    """Return the JSON schema that defines a priority assessment."""
    with resources.files(__name__).joinpath("priority_assessment.schema.json").open(
        "r", encoding="utf-8"
    ) as fp:
        return json.load(fp)
