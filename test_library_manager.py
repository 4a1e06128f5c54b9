#!/usr/bin/env python3
"""
Test script for settings and saved document persistence.
"""

import json
import os
import sys
import tempfile
import unittest
from unittest.mock import patch

# Add the project root to the path so we can import glance modules
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from glance import library_manager
from glance.storage import JsonFileStore, MemoryStore


class TestSettings(unittest.TestCase):

    def test_defaults_when_store_is_empty(self):
        settings = library_manager.load_settings(MemoryStore())
        self.assertEqual(settings, {
            "wpm": 300,
            "words_per_unit": 3,
            "smart_timing": True,
            "comprehension_mode": False,
            "dark_mode": True,
            "font_size_level": 2,
        })

    def test_reads_stored_values(self):
        store = MemoryStore({
            "glanceWpm": "450",
            "glanceWordsPerUnit": "1",
            "glanceSmartTiming": "false",
            "glanceComprehensionMode": "true",
            "glanceDarkMode": "false",
            "glanceFontSize": "0",
        })
        settings = library_manager.load_settings(store)
        self.assertEqual(settings["wpm"], 450)
        self.assertEqual(settings["words_per_unit"], 1)
        self.assertFalse(settings["smart_timing"])
        self.assertTrue(settings["comprehension_mode"])
        self.assertFalse(settings["dark_mode"])
        self.assertEqual(settings["font_size_level"], 0)

    def test_malformed_values_fall_back_individually(self):
        store = MemoryStore({
            "glanceWpm": "fast",
            "glanceWordsPerUnit": "NaN",
            "glanceSmartTiming": "maybe",
            "glanceComprehensionMode": "true",
        })
        with self.assertLogs(level="WARNING"):
            settings = library_manager.load_settings(store)
        self.assertEqual(settings["wpm"], 300)
        self.assertEqual(settings["words_per_unit"], 3)
        self.assertTrue(settings["smart_timing"])
        self.assertTrue(settings["comprehension_mode"])

    def test_out_of_range_values_are_clamped(self):
        store = MemoryStore({"glanceWpm": "5000", "glanceWordsPerUnit": "0", "glanceFontSize": "9"})
        settings = library_manager.load_settings(store)
        self.assertEqual(settings["wpm"], 1500)
        self.assertEqual(settings["words_per_unit"], 1)
        self.assertEqual(settings["font_size_level"], 2)

    def test_save_settings_writes_each_key(self):
        store = MemoryStore()
        library_manager.save_settings(store, {"wpm": 500, "smart_timing": False})
        self.assertEqual(store.get("glanceWpm"), "500")
        self.assertEqual(store.get("glanceSmartTiming"), "false")
        self.assertIsNone(store.get("glanceWordsPerUnit"))
        self.assertEqual(library_manager.load_settings(store)["wpm"], 500)


class TestSavedDocuments(unittest.TestCase):

    def test_save_and_find(self):
        store = MemoryStore()
        document = library_manager.save_document(store, "  Essay ", "Some words to read.")
        self.assertEqual(document["title"], "Essay")
        self.assertEqual(set(document), {"id", "title", "content", "timestamp"})
        self.assertEqual(library_manager.load_saved_documents(store), [document])
        self.assertEqual(library_manager.find_saved_document(store, document["id"]), document)
        self.assertIsNone(library_manager.find_saved_document(store, "nope"))

    def test_blank_title_or_content_is_rejected(self):
        store = MemoryStore()
        self.assertIsNone(library_manager.save_document(store, "  ", "text"))
        self.assertIsNone(library_manager.save_document(store, "Title", "   "))
        self.assertEqual(library_manager.load_saved_documents(store), [])

    def test_ids_are_unique(self):
        store = MemoryStore()
        with patch("glance.library_manager.time.time", return_value=1700000000.0):
            first = library_manager.save_document(store, "One", "first text")
            second = library_manager.save_document(store, "Two", "second text")
        self.assertNotEqual(first["id"], second["id"])

    def test_delete(self):
        store = MemoryStore()
        document = library_manager.save_document(store, "Gone", "soon")
        self.assertTrue(library_manager.delete_saved_document(store, document["id"]))
        self.assertFalse(library_manager.delete_saved_document(store, document["id"]))
        self.assertEqual(library_manager.load_saved_documents(store), [])

    def test_corrupt_list_is_treated_as_empty(self):
        with self.assertLogs(level="WARNING"):
            self.assertEqual(library_manager.load_saved_documents(MemoryStore({"glanceSavedTexts": "{oops"})), [])
        with self.assertLogs(level="WARNING"):
            self.assertEqual(library_manager.load_saved_documents(MemoryStore({"glanceSavedTexts": '{"a": 1}'})), [])

    def test_malformed_entries_are_skipped(self):
        good = {"id": "1", "title": "T", "content": "c", "timestamp": "2024-01-01T00:00:00+00:00"}
        raw = json.dumps([good, {"id": 2}, "junk"])
        self.assertEqual(library_manager.load_saved_documents(MemoryStore({"glanceSavedTexts": raw})), [good])

    def test_most_recent_document(self):
        older = {"id": "1", "title": "Old", "content": "a", "timestamp": "2023-05-01T10:00:00+00:00"}
        newer = {"id": "2", "title": "New", "content": "b", "timestamp": "2024-02-01T10:00:00+00:00"}
        store = MemoryStore({"glanceSavedTexts": json.dumps([newer, older])})
        self.assertEqual(library_manager.find_most_recent_document(store)["title"], "New")
        self.assertIsNone(library_manager.find_most_recent_document(MemoryStore()))


class TestJsonFileStore(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.temp_dir.name, "nested", "store.json")

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_values_persist_between_instances(self):
        store = JsonFileStore(self.path)
        store.set("glanceWpm", 420)
        reopened = JsonFileStore(self.path)
        self.assertEqual(reopened.get("glanceWpm"), "420")
        reopened.delete("glanceWpm")
        self.assertIsNone(JsonFileStore(self.path).get("glanceWpm"))

    def test_corrupt_file_is_treated_as_empty(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write("not json")
        with self.assertLogs(level="WARNING"):
            store = JsonFileStore(self.path)
        self.assertIsNone(store.get("glanceWpm"))
        self.assertEqual(library_manager.load_settings(store)["wpm"], 300)

    def test_get_default(self):
        self.assertEqual(JsonFileStore(self.path).get("missing", "fallback"), "fallback")


if __name__ == '__main__':
    unittest.main()
