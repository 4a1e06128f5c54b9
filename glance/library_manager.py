"""Settings and saved document persistence for the Glance speed reader."""

import json
import logging
import time
from datetime import datetime, timezone

from . import config
from .segmenter import clamp_words_per_unit
from .timing_calculator import clamp_wpm

WPM_KEY = "glanceWpm"
DARK_MODE_KEY = "glanceDarkMode"
FONT_SIZE_KEY = "glanceFontSize"
WORDS_PER_UNIT_KEY = "glanceWordsPerUnit"
SMART_TIMING_KEY = "glanceSmartTiming"
COMPREHENSION_MODE_KEY = "glanceComprehensionMode"
SAVED_TEXTS_KEY = "glanceSavedTexts"


def default_settings() -> dict:
    return {
        "wpm": config.DEFAULT_WPM,
        "words_per_unit": config.DEFAULT_WORDS_PER_UNIT,
        "smart_timing": True,
        "comprehension_mode": False,
        "dark_mode": config.DEFAULT_DARK_MODE,
        "font_size_level": config.DEFAULT_FONT_SIZE_LEVEL,
    }


def _parse_bool(raw):
    if raw in ("true", "True"):
        return True
    if raw in ("false", "False"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _parse_int(raw):
    value = float(raw)
    if value != value or value in (float('inf'), float('-inf')):
        raise ValueError(f"not a finite number: {raw!r}")
    return int(value)


def load_settings(store) -> dict:
    """
    Load reader settings from a key-value store.

    Each field is read independently; a missing or malformed value falls back
    to its default without affecting the others.

    Args:
        store: KeyValueStore to read from

    Returns:
        dict: wpm, words_per_unit, smart_timing, comprehension_mode,
            dark_mode and font_size_level
    """
    settings = default_settings()
    fields = [
        ("wpm", WPM_KEY, lambda raw: clamp_wpm(_parse_int(raw))),
        ("words_per_unit", WORDS_PER_UNIT_KEY, lambda raw: clamp_words_per_unit(_parse_int(raw))),
        ("smart_timing", SMART_TIMING_KEY, _parse_bool),
        ("comprehension_mode", COMPREHENSION_MODE_KEY, _parse_bool),
        ("dark_mode", DARK_MODE_KEY, _parse_bool),
        ("font_size_level", FONT_SIZE_KEY, lambda raw: max(0, min(2, _parse_int(raw)))),
    ]

    for name, key, parse in fields:
        raw = store.get(key)
        if raw is None:
            continue
        try:
            settings[name] = parse(raw)
        except (TypeError, ValueError) as e:
            logging.warning(f"Ignoring malformed setting {key}={raw!r}: {e}")

    return settings


def save_settings(store, settings: dict):
    """
    Save reader settings to a key-value store.

    Args:
        store: KeyValueStore to write to
        settings: Settings dict; keys that are absent are left untouched
    """
    encoders = {
        "wpm": (WPM_KEY, str),
        "words_per_unit": (WORDS_PER_UNIT_KEY, str),
        "smart_timing": (SMART_TIMING_KEY, lambda value: "true" if value else "false"),
        "comprehension_mode": (COMPREHENSION_MODE_KEY, lambda value: "true" if value else "false"),
        "dark_mode": (DARK_MODE_KEY, lambda value: "true" if value else "false"),
        "font_size_level": (FONT_SIZE_KEY, str),
    }
    for name, (key, encode) in encoders.items():
        if name in settings:
            store.set(key, encode(settings[name]))


def _is_valid_document(item) -> bool:
    return (
        isinstance(item, dict)
        and all(isinstance(item.get(field), str) for field in ("id", "title", "content", "timestamp"))
    )


def load_saved_documents(store) -> list[dict]:
    """
    Load the list of saved documents.

    Returns:
        list[dict]: Documents with id, title, content and timestamp. A corrupt
            list is treated as empty and malformed entries are skipped.
    """
    raw = store.get(SAVED_TEXTS_KEY)
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logging.warning(f"Failed to parse saved documents: {e}")
        return []
    if not isinstance(items, list):
        logging.warning("Saved documents are not a list; ignoring them")
        return []
    return [item for item in items if _is_valid_document(item)]


def _write_saved_documents(store, documents):
    store.set(SAVED_TEXTS_KEY, json.dumps(documents))


def save_document(store, title: str, content: str) -> dict | None:
    """
    Append a document to the saved list.

    Args:
        store: KeyValueStore to write to
        title: Document title
        content: Document text

    Returns:
        dict: The saved document, or None when the title or content is blank
    """
    if not title or not title.strip() or not content or not content.strip():
        return None

    documents = load_saved_documents(store)
    document = {
        "id": str(int(time.time() * 1000)),
        "title": title.strip(),
        "content": content,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    existing_ids = {item["id"] for item in documents}
    while document["id"] in existing_ids:
        document["id"] = str(int(document["id"]) + 1)

    documents.append(document)
    _write_saved_documents(store, documents)
    logging.info(f"Saved document '{document['title']}' ({document['id']})")
    return document


def delete_saved_document(store, document_id: str) -> bool:
    documents = load_saved_documents(store)
    remaining = [item for item in documents if item["id"] != document_id]
    if len(remaining) == len(documents):
        return False
    _write_saved_documents(store, remaining)
    return True


def find_saved_document(store, document_id: str) -> dict | None:
    for item in load_saved_documents(store):
        if item["id"] == document_id:
            return item
    return None


def find_most_recent_document(store) -> dict | None:
    """Return the saved document with the latest timestamp, if any."""
    documents = load_saved_documents(store)
    if not documents:
        return None
    return max(documents, key=lambda item: item["timestamp"])
