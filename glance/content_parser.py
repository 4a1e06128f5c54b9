"""Plain text extraction from document files for the Glance speed reader."""

import logging
import os
import posixpath
import re
import xml.etree.ElementTree as ET
import zipfile
from html import unescape
from html.parser import HTMLParser
from urllib.parse import unquote

import fitz
import markdown
from docx import Document
from rich.console import Console
from striprtf.striprtf import rtf_to_text

SUPPORTED_EXTENSIONS = ('.txt', '.md', '.html', '.htm', '.docx', '.pdf', '.rtf', '.epub')


class HTMLTextExtractor(HTMLParser):
    """Collects the readable text of an HTML document, one block per paragraph."""

    BLOCK_TAGS = {"p", "div", "br", "li", "h1", "h2", "h3", "h4", "h5", "h6",
                  "blockquote", "pre", "tr", "section", "article"}
    SKIP_TAGS = {"script", "style", "head", "title"}

    def __init__(self):
        super().__init__(convert_charrefs=False)
        self.blocks = []
        self._current = []
        self._skip_depth = 0

    def handle_starttag(self, tag, attrs):
        if tag in self.SKIP_TAGS:
            self._skip_depth += 1
        elif tag in self.BLOCK_TAGS:
            self._flush()

    def handle_startendtag(self, tag, attrs):
        if tag in self.BLOCK_TAGS:
            self._flush()

    def handle_endtag(self, tag):
        if tag in self.SKIP_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag in self.BLOCK_TAGS:
            self._flush()

    def handle_data(self, data):
        if not self._skip_depth:
            self._current.append(data)

    def handle_entityref(self, name):
        self.handle_data(unescape(f"&{name};"))

    def handle_charref(self, name):
        self.handle_data(unescape(f"&#{name};"))

    def _flush(self):
        block = re.sub(r'\s+', ' ', "".join(self._current)).strip()
        if block:
            self.blocks.append(block)
        self._current = []

    def get_text(self) -> str:
        self._flush()
        return "\n\n".join(self.blocks)


def html_to_text(html_content: str) -> str:
    parser = HTMLTextExtractor()
    parser.feed(html_content)
    parser.close()
    return parser.get_text()


def normalize_text(text: str) -> str:
    """Normalise newlines and drop blank lines, keeping paragraph breaks."""
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    paragraphs = [re.sub(r'[ \t]+', ' ', p).strip() for p in re.split(r'\n\s*\n', text)]
    return "\n\n".join(p for p in paragraphs if p)


def _read_text_file(file_path):
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except UnicodeDecodeError:
        with open(file_path, 'r', encoding='latin-1') as f:
            return f.read()


def extract_text(file_path, console: Console | None = None) -> str:
    """
    Extract the readable text of a document based on its extension.

    Args:
        file_path: Path to the document
        console: Rich console used to report problems to the user

    Returns:
        str: The document text, or an empty string if nothing could be read
    """
    console = console or Console()
    extension = os.path.splitext(file_path)[1].lower()
    extractors = {
        '.txt': _extract_text_txt,
        '.md': _extract_text_md,
        '.html': _extract_text_html,
        '.htm': _extract_text_html,
        '.docx': _extract_text_docx,
        '.pdf': _extract_text_pdf,
        '.rtf': _extract_text_rtf,
        '.epub': _extract_text_epub,
    }
    extractor = extractors.get(extension)
    if extractor is None:
        console.print(f"[bold red]Error: Unsupported file type '{extension}'. "
                      f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}[/bold red]")
        return ""

    try:
        return normalize_text(extractor(file_path))
    except Exception as e:
        logging.error(f"Failed to extract text from {file_path}: {e}", exc_info=True)
        console.print(f"[bold red]Error: Failed to read {extension[1:].upper()} file: {e}[/bold red]")
        return ""


def _extract_text_txt(file_path):
    return _read_text_file(file_path)


def _extract_text_md(file_path):
    html_content = markdown.markdown(_read_text_file(file_path), extensions=['fenced_code'])
    return html_to_text(html_content)


def _extract_text_html(file_path):
    return html_to_text(_read_text_file(file_path))


def _extract_text_docx(file_path):
    doc = Document(file_path)
    return "\n\n".join(para.text for para in doc.paragraphs if para.text and not para.text.isspace())


def _extract_text_pdf(file_path):
    pages = []
    with fitz.open(file_path) as doc:
        for page in doc:
            blocks = page.get_text("blocks")
            pages.extend(
                re.sub(r'\s+', ' ', block[4]).strip()
                for block in blocks
                if block[6] == 0 and block[4].strip()
            )
    return "\n\n".join(pages)


def _extract_text_rtf(file_path):
    with open(file_path, 'r', encoding='utf-8', errors='ignore') as f:
        return rtf_to_text(f.read(), errors="ignore")


def _extract_text_epub(file_path):
    """Read the spine of an EPUB in order and join the text of each chapter."""
    with zipfile.ZipFile(file_path, 'r') as archive:
        container = ET.fromstring(archive.read("META-INF/container.xml"))
        rootfile = container.find(".//{urn:oasis:names:tc:opendocument:xmlns:container}rootfile")
        opf_path = rootfile.attrib["full-path"]
        opf_dir = posixpath.dirname(opf_path)

        opf = ET.fromstring(archive.read(opf_path))
        ns = {"opf": "http://www.idpf.org/2007/opf"}
        manifest = {
            item.attrib["id"]: item.attrib["href"]
            for item in opf.findall(".//opf:manifest/opf:item", ns)
        }
        chapters = []
        for itemref in opf.findall(".//opf:spine/opf:itemref", ns):
            href = manifest.get(itemref.attrib.get("idref"))
            if not href:
                continue
            chapter_path = posixpath.normpath(posixpath.join(opf_dir, unquote(href)))
            try:
                content = archive.read(chapter_path).decode('utf-8', errors='ignore')
            except KeyError:
                logging.warning(f"EPUB spine item missing from archive: {chapter_path}")
                continue
            text = html_to_text(content)
            if text:
                chapters.append(text)
    return "\n\n".join(chapters)
