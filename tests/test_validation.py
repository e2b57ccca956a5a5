import pytest

from flowva.core.catalog import CATALOG
from flowva.core.validation import (
    OnboardingPayload,
    check_email,
    check_new_password,
    check_password,
    parse,
)
from flowva.errors import InputError


def test_check_email_normalizes():
    assert check_email("  A@X.Com ") == "a@x.com"


@pytest.mark.parametrize(
    "raw",
    ["", None, "no-at-sign", "a@b", "a b@x.com", 42, "a@b..c", "a@-.-", "a@.x.y", "..@x.y", "a@x.com@y.com"],
)
def test_check_email_rejects(raw):
    with pytest.raises(InputError) as ei:
        check_email(raw)
    assert ei.value.field == "email"


@pytest.mark.parametrize(
    "pw, message",
    [
        ("Ab1", "Password must be at least 8 characters"),
        ("abcdef12", "Password must contain at least one uppercase letter"),
        ("ABCDEF12", "Password must contain at least one lowercase letter"),
        ("Abcdefgh", "Password must contain at least one number"),
    ],
)
def test_new_password_rules(pw, message):
    with pytest.raises(InputError) as ei:
        check_new_password(pw)
    assert ei.value.field == "password"
    assert ei.value.message == message


def test_new_password_accepts_strong_password():
    assert check_new_password("Abcdef12") == "Abcdef12"


def test_signin_password_only_required():
    assert check_password("x") == "x"
    with pytest.raises(InputError):
        check_password("")


def test_onboarding_payload_cleans_values():
    p = parse(
        OnboardingPayload,
        {"useCase": "track-tools", "categories": ["design", "design"], "tools": [" Figma ", "", "Figma"], "name": "  "},
    )
    assert p.use_case == "track-tools"
    assert p.categories == ["design"]
    assert p.tools == ["Figma"]
    assert p.name is None


def test_onboarding_payload_rejects_unknown_use_case():
    with pytest.raises(InputError) as ei:
        parse(OnboardingPayload, {"useCase": "sell-stuff"})
    assert ei.value.field == "useCase"


def test_onboarding_payload_rejects_unknown_category():
    with pytest.raises(InputError) as ei:
        parse(OnboardingPayload, {"useCase": "track-tools", "categories": ["gardening"]})
    assert ei.value.field == "categories"
    assert ei.value.message == "Unknown category: gardening"


def test_parse_requires_object():
    with pytest.raises(InputError) as ei:
        parse(OnboardingPayload, ["not", "an", "object"])
    assert ei.value.field == "body"


def test_catalog_contents():
    assert len(CATALOG.categories) == 10
    assert set(CATALOG.use_cases) == {"track-tools", "organize-work", "discover-tools", "earn-rewards"}
    tools = CATALOG.tools_for(["design", "collaboration", "unknown"])
    assert tools == sorted(tools)
    assert "Figma" in tools and "Slack" in tools
    assert CATALOG.preview("track-tools").title == "Your Subscription Tracker"
    assert CATALOG.preview("nope") is None
    assert CATALOG.tool_icon("Docker") == "🐳"
    assert CATALOG.tool_icon("Unheard Of") == CATALOG.default_icon
