"""Render normalized OCR text as a structured, Word-style document.

Two paths, chosen by ``has_document_structure``:

- enhance: the text already reads like a document, so only spacing and
  section header casing are touched;
- convert: plain text is rebuilt into title, sections and wrapped
  paragraphs with a closing footer.

Both paths start with the same banner (upper-cased title, ``=`` underline,
``Date:`` line) so the DOCX writer can always find the title.
"""

from __future__ import annotations

import re
import textwrap
from datetime import date
from typing import List, Optional

from .dates import long_date

UNTITLED_DOCUMENT = "Untitled Document"
FOOTER_TEXT = "End of Document"
SECTION_RULE = "─"
TITLE_RULE = "="

PARAGRAPH_WIDTH = 80
PARAGRAPH_INDENT = "    "
SUBHEADING_INDENT = "  "
MAX_TITLE_LENGTH = 100
MAX_HEADER_LENGTH = 60
MAX_SUBHEADING_LENGTH = 50
CONTINUOUS_FLUSH_LENGTH = 500
FOOTER_RULE_WIDTH = 50

DOCUMENT_KEYWORDS = ("introduction", "conclusion", "summary", "chapter", "section")
SECTION_KEYWORDS = (
    "introduction", "background", "overview", "summary",
    "chapter", "section", "part", "discussion",
    "analysis", "findings", "results", "conclusion",
    "recommendations", "abstract", "preface",
)
ENHANCED_HEADERS = (
    "Introduction", "Background", "Overview", "Summary",
    "Discussion", "Analysis", "Findings", "Results",
    "Conclusion", "Recommendations", "References",
)

_SENTENCE_END = (".", "!", "?")
_EXTRA_BLANK_LINES_RE = re.compile(r"\n{3,}")
_RUN_ON_SENTENCE_RE = re.compile(r"([.!?])([A-Z])")
_HEADER_LINE_RES = [
    (re.compile(rf"^{header}$", re.MULTILINE), header.upper()) for header in ENHANCED_HEADERS
]


def _content_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def has_document_structure(text: str) -> bool:
    """Return True when ``text`` already looks like a document.

    The first non-empty line must be shorter than 100 characters and the
    text must either have three or more blank-line separated blocks or
    mention one of the common section words.
    """
    lines = [line for line in text.split("\n") if line]
    first_line = lines[0] if lines else ""
    has_title = len(first_line) < MAX_TITLE_LENGTH
    has_paragraphs = len(text.split("\n\n")) > 2
    lowered = text.lower()
    has_headings = any(keyword in lowered for keyword in DOCUMENT_KEYWORDS)
    return has_title and (has_paragraphs or has_headings)


def extract_title(lines: List[str]) -> str:
    """Use the first line as title, or its first five words if it is a sentence."""
    if not lines:
        return UNTITLED_DOCUMENT
    first_line = lines[0]
    if len(first_line) < MAX_TITLE_LENGTH and not first_line.endswith(_SENTENCE_END):
        return first_line
    return " ".join(first_line.split()[:5])


def is_section_header(line: str) -> bool:
    if len(line) > MAX_HEADER_LENGTH:
        return False
    lowered = line.lower()
    return any(keyword in lowered for keyword in SECTION_KEYWORDS)


def organize_sections(lines: List[str]) -> List[List[str]]:
    """Split content lines into sections, starting a new one at each header line."""
    sections: List[List[str]] = []
    current: List[str] = []
    for line in lines:
        if is_section_header(line) and current:
            sections.append(current)
            current = [line]
        else:
            current.append(line)
    if current:
        sections.append(current)
    return sections


def wrap_paragraph(text: str) -> str:
    """Wrap at 80 columns with a 4-space first-line indent.

    Doxygen:
    - @param text: Paragraph text, possibly joined from several OCR lines.
    - @return: Wrapped paragraph; continuation lines are not indented.
    """
    return textwrap.fill(
        text.strip(),
        width=PARAGRAPH_WIDTH,
        initial_indent=PARAGRAPH_INDENT,
        subsequent_indent="",
        break_long_words=False,
        break_on_hyphens=False,
    )


def _banner(title: str, today: Optional[date]) -> str:
    return f"{title.upper()}\n{TITLE_RULE * len(title)}\n\nDate: {long_date(today)}"


def _format_section(section: List[str]) -> str:
    blocks: List[str] = []
    paragraph: List[str] = []

    def flush() -> None:
        if paragraph:
            blocks.append(wrap_paragraph(" ".join(paragraph)))
            paragraph.clear()

    header = section[0]
    if is_section_header(header):
        blocks.append(f"{header.upper()}\n{SECTION_RULE * len(header)}")
        content = section[1:]
    else:
        content = section

    for line in content:
        if len(line) < MAX_SUBHEADING_LENGTH and line.endswith(":"):
            flush()
            blocks.append(SUBHEADING_INDENT + line)
            continue
        paragraph.append(line)
        if line.endswith(_SENTENCE_END):
            flush()
    flush()
    return "\n\n".join(blocks)


def _format_continuous(lines: List[str]) -> str:
    blocks: List[str] = []
    paragraph = ""
    for line in lines:
        paragraph = f"{paragraph} {line}" if paragraph else line
        if line.endswith(_SENTENCE_END) or len(paragraph) > CONTINUOUS_FLUSH_LENGTH:
            blocks.append(wrap_paragraph(paragraph))
            paragraph = ""
    if paragraph:
        blocks.append(wrap_paragraph(paragraph))
    return "\n\n".join(blocks)


def enhance_document(text: str) -> str:
    """Tidy text that already has a document layout.

    Collapses extra blank lines, splits run-on sentences (``end.Next``) into
    paragraphs and upper-cases lines that are exactly a known section word.
    """
    enhanced = _EXTRA_BLANK_LINES_RE.sub("\n\n", text)
    enhanced = _RUN_ON_SENTENCE_RE.sub(r"\1\n\n\2", enhanced)
    for pattern, replacement in _HEADER_LINE_RES:
        enhanced = pattern.sub(replacement, enhanced)
    return enhanced


def convert_to_document(text: str, today: Optional[date] = None) -> str:
    """Rebuild plain text as title, dated banner, sections and footer.

    Doxygen:
    - @param text: Normalized plain text.
    - @param today: Date for the ``Date:`` line; defaults to today.
    - @return: Structured document text.
    """
    lines = _content_lines(text)
    title = extract_title(lines)
    content = lines[1:] if lines and title == lines[0] else lines

    parts = [_banner(title, today)]
    sections = organize_sections(content)
    if sections:
        parts.extend(block for block in (_format_section(s) for s in sections) if block)
    else:
        continuous = _format_continuous(content)
        if continuous:
            parts.append(continuous)
    parts.append(f"{SECTION_RULE * FOOTER_RULE_WIDTH}\n{FOOTER_TEXT}")
    return "\n\n".join(parts)


def structure_as_document(text: str, today: Optional[date] = None) -> str:
    """Format OCR text as a Word-style document.

    Never raises; an empty input produces an "Untitled Document" skeleton.
    """
    cleaned = (text or "").strip()
    if not has_document_structure(cleaned):
        return convert_to_document(cleaned, today)

    lines = _content_lines(cleaned)
    title = extract_title(lines)
    body = cleaned
    if lines and title == lines[0]:
        body = cleaned.partition("\n")[2].strip()
    banner = _banner(title, today)
    if not body:
        return banner
    return f"{banner}\n\n{enhance_document(body)}"
