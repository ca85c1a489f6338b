# backend/use_cases.py
"""
Use-case templates.

A template is an ordered list of categories the user fills one step at a
time. The table lives in data/use_cases.yaml, is loaded once and is never
mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .config import get_settings
from .log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CategoryDefinition:
    name: str
    product_type_ids: Tuple[str, ...]
    required: bool = True

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("category name must not be empty")
        if not self.product_type_ids:
            raise ValueError(f"category '{self.name}' has no product type ids")


@dataclass(frozen=True)
class UseCaseTemplate:
    id: str
    name: str
    description: str
    icon: str
    categories: Tuple[CategoryDefinition, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.categories:
            raise ValueError(f"use case '{self.id}' has no categories")
        seen = set()
        for category in self.categories:
            # category name is the selection key
            if category.name in seen:
                raise ValueError(
                    f"use case '{self.id}' repeats category name '{category.name}'"
                )
            seen.add(category.name)

    @property
    def category_names(self) -> List[str]:
        return [c.name for c in self.categories]

    def category(self, name: str) -> Optional[CategoryDefinition]:
        for c in self.categories:
            if c.name == name:
                return c
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "categories": [
                {
                    "name": c.name,
                    "productTypeIds": list(c.product_type_ids),
                    "required": c.required,
                }
                for c in self.categories
            ],
        }


# Loading

def _load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_use_cases(data: Dict[str, Any]) -> Tuple[UseCaseTemplate, ...]:
    templates: List[UseCaseTemplate] = []
    ids = set()
    for raw in data.get("use_cases", []) or []:
        categories = tuple(
            CategoryDefinition(
                name=str(c["name"]),
                product_type_ids=tuple(str(t) for t in c.get("product_type_ids", []) or []),
                required=bool(c.get("required", True)),
            )
            for c in raw.get("categories", []) or []
        )
        template = UseCaseTemplate(
            id=str(raw["id"]),
            name=str(raw.get("name", raw["id"])),
            description=str(raw.get("description", "")),
            icon=str(raw.get("icon", "")),
            categories=categories,
        )
        if template.id in ids:
            raise ValueError(f"duplicate use case id '{template.id}'")
        ids.add(template.id)
        templates.append(template)
    return tuple(templates)


def load_use_cases(path: Optional[str] = None) -> Tuple[UseCaseTemplate, ...]:
    path = path or get_settings().USE_CASES_PATH
    data = _load_yaml(path)
    templates = parse_use_cases(data)
    logger.info(
        f"Loaded {len(templates)} use cases from {path} (version={data.get('version')})"
    )
    return templates


@lru_cache
def get_use_cases() -> Tuple[UseCaseTemplate, ...]:
    return load_use_cases()


def get_use_case(use_case_id: str) -> Optional[UseCaseTemplate]:
    for template in get_use_cases():
        if template.id == use_case_id:
            return template
    return None
