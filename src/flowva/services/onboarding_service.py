# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Any, Dict, Optional

from flowva.core.catalog import CATALOG, Catalog
from flowva.core.validation import OnboardingPayload
from flowva.infra.onboarding_repo import OnboardingAnswers, OnboardingRecord, OnboardingStore
from flowva.infra.user_repo import UserRecord


def submit_onboarding(store: OnboardingStore, user_id: str, payload: OnboardingPayload) -> OnboardingRecord:
    answers = OnboardingAnswers(
        use_case=payload.use_case,
        categories=list(payload.categories),
        tools=list(payload.tools),
        name=payload.name,
    )
    return store.upsert(user_id, answers)


def landing_path(record: Optional[OnboardingRecord]) -> str:
    """Where an authenticated user belongs: the wizard until it is completed, then the dashboard."""
    if record is not None and record.completed:
        return "/dashboard"
    return "/onboarding"


def wizard_context(record: Optional[OnboardingRecord], *, catalog: Catalog = CATALOG) -> Dict[str, Any]:
    selected = list(record.categories) if record else []
    return {
        "use_cases": list(catalog.use_cases.values()),
        "categories": list(catalog.categories.values()),
        "selected_use_case": record.use_case if record else "",
        "selected_categories": selected,
        "selected_tools": list(record.tools) if record else [],
        "suggested_tools": catalog.tools_for(selected),
        "name": (record.name or "") if record else "",
    }


def dashboard_context(
    user: UserRecord,
    record: Optional[OnboardingRecord],
    *,
    catalog: Catalog = CATALOG,
) -> Dict[str, Any]:
    preview = catalog.preview(record.use_case if record else None)
    tools = list(record.tools) if record else []
    display_name = (record.name if record and record.name else None) or user.name or user.email
    return {
        "user": user.public(),
        "display_name": display_name,
        "onboarding": record.to_dict() if record else None,
        "preview": preview.to_dict() if preview else None,
        "tools": [{"name": t, "icon": catalog.tool_icon(t)} for t in tools],
    }
