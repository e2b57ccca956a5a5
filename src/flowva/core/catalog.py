# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import yaml

BASE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_CATALOG_PATH = Path(
    os.getenv("FLOWVA_CATALOG_PATH", str(BASE_DIR / "data" / "catalog.yml"))
).resolve()


@dataclass(frozen=True)
class Category:
    key: str
    label: str
    description: str
    tools: Tuple[str, ...]


@dataclass(frozen=True)
class Preview:
    title: str
    items: Tuple[str, ...]
    summary: str

    def to_dict(self) -> dict:
        return {"title": self.title, "items": list(self.items), "summary": self.summary}


@dataclass(frozen=True)
class UseCase:
    key: str
    label: str
    preview: Preview


@dataclass(frozen=True)
class Catalog:
    """Static onboarding content: tool categories, use-case previews and tool icons."""

    categories: Dict[str, Category] = field(default_factory=dict)
    use_cases: Dict[str, UseCase] = field(default_factory=dict)
    icons: Dict[str, str] = field(default_factory=dict)
    default_icon: str = ""

    def has_category(self, key: str) -> bool:
        return key in self.categories

    def tools_for(self, keys: Iterable[str]) -> List[str]:
        seen = set()
        for k in keys or []:
            cat = self.categories.get(k)
            if cat:
                seen.update(cat.tools)
        return sorted(seen)

    def preview(self, use_case: Optional[str]) -> Optional[Preview]:
        uc = self.use_cases.get(use_case or "")
        return uc.preview if uc else None

    def tool_icon(self, tool: str) -> str:
        return self.icons.get(tool, self.default_icon)


def _load_catalog(path: Path) -> Catalog:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Catalog must be a mapping: {path}")

    categories: Dict[str, Category] = {}
    for key, cdata in (raw.get("categories") or {}).items():
        if not isinstance(cdata, dict):
            continue
        k = str(key).strip()
        categories[k] = Category(
            key=k,
            label=str(cdata.get("label") or k),
            description=str(cdata.get("description") or ""),
            tools=tuple(str(t) for t in (cdata.get("tools") or [])),
        )

    use_cases: Dict[str, UseCase] = {}
    for key, udata in (raw.get("use_cases") or {}).items():
        if not isinstance(udata, dict):
            continue
        k = str(key).strip()
        p = udata.get("preview") or {}
        use_cases[k] = UseCase(
            key=k,
            label=str(udata.get("label") or k),
            preview=Preview(
                title=str(p.get("title") or ""),
                items=tuple(str(i) for i in (p.get("items") or [])),
                summary=str(p.get("summary") or ""),
            ),
        )

    icons = {str(k): str(v) for k, v in (raw.get("icons") or {}).items()}
    return Catalog(
        categories=categories,
        use_cases=use_cases,
        icons=icons,
        default_icon=str(raw.get("default_icon") or ""),
    )


CATALOG = _load_catalog(DEFAULT_CATALOG_PATH)
