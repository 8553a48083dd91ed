"""Classification of content listings.

The content service returns one row per page for a content type
(mortgage, credit, menu...). The rows are heterogeneous, so this module
finds the row array, derives a title and page number for each row and
infers the content kind from the component type, known dropdown fields
and title keywords.
"""

import logging
import math
import re
from typing import Any

from bankim_portal.dto.responses import ContentListItem
from bankim_portal.entities import ContentKind

logger = logging.getLogger(__name__)

SCREEN_LOCATIONS: dict[str, str] = {
    "mortgage": "mortgage_calculation",
    "mortgage-refi": "mortgage_refinancing",
    "credit": "credit_calculation",
    "credit-refi": "credit_refinancing",
    "general": "general_pages",
    "menu": "navigation_menu",
}

# Field labels in mortgage content that render as dropdowns
DROPDOWN_FIELDS: tuple[str, ...] = (
    "main_source", "type", "bank", "borrowers", "children18",
    "citizenship", "city", "debt_types", "education", "family_status",
    "first_home", "has_additional", "how_much_childrens", "is_foreigner",
    "is_medinsurance", "is_public", "partner_pay_mortgage", "property_ownership",
    "sphere", "when_needed",
)

# Title keywords of the mortgage flow, checked in order
MORTGAGE_TITLE_RULES: tuple[tuple[tuple[str, ...], ContentKind], ...] = (
    (("калькулятор", "расчет"), ContentKind.MIXED),
    (("выбор", "добавить партнера", "самозанятый", "пенсионер", "студент", "безработный"), ContentKind.DROPDOWN),
    (("показать предложения", "отпуск без содержания"), ContentKind.LINK),
    (("личные данные", "анкета"), ContentKind.MIXED),
)

MIXED_ACTION_THRESHOLD = 10

_PAGE_NUMBER = re.compile(r"^(\d+(?:\.\d+)?)\.")


def screen_location_for(content_type: str) -> str | None:
    return SCREEN_LOCATIONS.get(content_type)


def _find_rows(content_type: str, data: Any) -> list[Any]:
    if content_type == "mortgage" and isinstance(data, dict) and isinstance(data.get("mortgage_content"), list):
        return data["mortgage_content"]
    if content_type == "menu" and isinstance(data, dict) and isinstance(data.get("menu_items"), list):
        return data["menu_items"]
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("data", "items"):
            if isinstance(data.get(key), list):
                return data[key]
    return []


def extract_items(content_type: str, data: Any) -> list[dict[str, Any]]:
    """Find the row array inside a listing payload; rows that are not objects are dropped."""
    rows = _find_rows(content_type, data)
    items = [row for row in rows if isinstance(row, dict)]
    if len(items) != len(rows):
        logger.warning("Dropped %d malformed %s rows", len(rows) - len(items), content_type)
    return items


def _number(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _title(item: dict[str, Any], index: int) -> str:
    translations = item.get("translations")
    if isinstance(translations, dict) and translations.get("ru"):
        return str(translations["ru"])
    return str(item.get("title_ru") or item.get("content_key") or f"Item {index + 1}")


def page_number(title: str, item: dict[str, Any], index: int) -> float:
    """Page number from a leading "7." or "7.1." title prefix, else the row's own."""
    match = _PAGE_NUMBER.match(title)
    if match:
        return float(match.group(1))
    return _number(item.get("page_number") or index + 1, index + 1)


def kind_from_component_type(component_type: str | None, content_key: str = "") -> ContentKind:
    if not isinstance(component_type, str) or not component_type:
        return ContentKind.TEXT
    comp = component_type.lower()
    if comp == "select" or "dropdown" in comp:
        return ContentKind.DROPDOWN
    if comp == "button" or "link" in comp:
        return ContentKind.LINK
    if "text" in comp:
        return ContentKind.TEXT
    if "mixed" in comp:
        return ContentKind.MIXED
    if comp == "field_label" and ".field." in content_key:
        if any(field in content_key for field in DROPDOWN_FIELDS):
            return ContentKind.DROPDOWN
    return ContentKind.TEXT


def kind_from_title(title: str, current: ContentKind) -> ContentKind:
    lower_title = title.lower()
    for keywords, kind in MORTGAGE_TITLE_RULES:
        if any(keyword in lower_title for keyword in keywords):
            return kind
    return current


def classify_item(content_type: str, item: dict[str, Any], index: int) -> ContentListItem:
    title = _title(item, index)
    kind = kind_from_component_type(item.get("component_type"), str(item.get("content_key") or ""))
    if content_type == "mortgage":
        kind = kind_from_title(title, kind)

    action_count = int(_number(item.get("action_count") or 1, 1))
    if action_count > MIXED_ACTION_THRESHOLD and kind is ContentKind.TEXT:
        kind = ContentKind.MIXED

    logger.debug(
        "Item %d: component_type=%s, action_count=%d, content_type=%s, title=%s",
        index, item.get("component_type"), action_count, kind.value, title,
    )

    item_id = item.get("id")
    return ContentListItem(
        id=str(item_id) if item_id is not None else f"item-{index}",
        title=title,
        action_count=action_count,
        last_modified=str(item.get("last_modified") or item.get("updated_at") or ""),
        content_type=kind,
        page_number=page_number(title, item, index),
    )


def classify_items(content_type: str, items: list[dict[str, Any]]) -> list[ContentListItem]:
    """Classify listing rows and order them by page number."""
    classified = [classify_item(content_type, item, index) for index, item in enumerate(items)]
    classified.sort(key=lambda item: item.page_number)
    return classified
