"""Deterministic development payloads.

Returned by the API service instead of a network call when the fallback
guard reports a placeholder backend. Every payload is shaped like the real
backend response so the callers cannot tell the difference, and nothing
depends on the current time.
"""

from datetime import datetime
from typing import Any

MOCK_TIMESTAMP = datetime(2024, 12, 15, 12, 0, 0)

# key -> (component_type, category, {language: value}); "en" is the fallback language
_MAIN_PAGE_CONTENT: dict[str, tuple[str, str, dict[str, str]]] = {
    "app.main.action.1.dropdown.income_source": (
        "dropdown",
        "dropdowns",
        {"ru": "Основной источник дохода", "he": "מקור הכנסה עיקרי", "en": "Primary Income Source"},
    ),
    "app.main.action.2.dropdown.employment_type": (
        "dropdown",
        "dropdowns",
        {"ru": "Тип занятости", "he": "סוג תעסוקה", "en": "Employment Type"},
    ),
    "app.main.action.3.dropdown.property_type": (
        "dropdown",
        "dropdowns",
        {"ru": "Тип недвижимости", "he": "סוג נכס", "en": "Property Type"},
    ),
    "app.main.action.4.text.page_title": (
        "text",
        "headers",
        {"ru": "Рассчитать Ипотеку", "he": "חשב את המשכנתא שלך", "en": "Calculate Mortgage"},
    ),
    "app.main.action.5.text.description": (
        "text",
        "headers",
        {"ru": "Кредитная история", "he": "היסטוריית אשראי", "en": "Credit History"},
    ),
    "app.main.action.6.text.document_type": (
        "text",
        "labels",
        {"ru": "Тип документа", "he": "סוג מסמך", "en": "Document Type"},
    ),
    "app.main.action.7.link.family_status": (
        "link",
        "navigation",
        {"ru": "Семейное положение", "he": "מצב משפחתי", "en": "Marital Status"},
    ),
}


def _localized(values: dict[str, str], language_code: str) -> str:
    return values.get(language_code, values["en"])


def content_by_screen(screen_location: str, language_code: str) -> dict[str, Any]:
    """Screen content in the backend's content-service shape."""
    content = {
        key: {
            "value": _localized(values, language_code),
            "component_type": component_type,
            "category": category,
            "language": language_code,
            "status": "approved",
        }
        for key, (component_type, category, values) in _MAIN_PAGE_CONTENT.items()
    }
    return {
        "status": "success",
        "screen_location": screen_location,
        "language_code": language_code,
        "content_count": len(content),
        "content": content,
    }


def content_by_key(content_key: str, language_code: str) -> dict[str, Any]:
    return {
        "content_key": content_key,
        "value": "Mock Content Value",
        "language": language_code,
        "status": "approved",
        "fallback_used": False,
    }


def main_page_action(action_id: str, updates: dict[str, Any] | None = None) -> dict[str, Any]:
    """Updated main page action, with the caller's changes applied on top."""
    action = {
        "id": action_id,
        "actionNumber": 1,
        "title": "1.Основной источник дохода",
        "titleRu": "Рассчитать Ипотеку",
        "titleHe": "חשב את המשכנתא שלך",
        "titleEn": "Calculate Mortgage",
        "actionType": "Дропдаун",
        "status": "published",
        "createdBy": "director-1",
        "lastModified": MOCK_TIMESTAMP.isoformat(),
        "createdAt": MOCK_TIMESTAMP.isoformat(),
    }
    action.update(updates or {})
    return action


def created_main_page_action(action: dict[str, Any]) -> dict[str, Any]:
    """Echo of a created action with the identifier and timestamps filled in."""
    created = dict(action)
    created["id"] = f"income-main-{action.get('actionNumber', 0)}"
    created["createdAt"] = MOCK_TIMESTAMP.isoformat()
    created["lastModified"] = MOCK_TIMESTAMP.isoformat()
    return created
