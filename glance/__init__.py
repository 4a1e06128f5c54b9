"""
Glance - Terminal RSVP Speed Reader

Paces a document one word or short phrase at a time at a controllable rate,
with adaptive per-unit timing, comprehension mode, a bounded review history
and a saved-document library. Reads TXT, Markdown, HTML, DOCX, PDF, RTF and EPUB.
"""

__version__ = "0.1.0"
__author__ = "Starry Eyes"
