"""Write formatted scan text to a Word document with python-docx.

The formatted text is split into blank-line separated blocks and each block
is mapped onto a Word element:

- ``TITLE`` + ``=====`` -> title heading;
- ``HEADER`` + ``─────`` -> level 1 heading;
- ``─────`` + footer text -> small centred closing line;
- 4-space indented blocks (wrapped paragraphs) -> one re-flowed paragraph;
- anything else (letters, plain text) -> a paragraph keeping its line breaks.
"""

from __future__ import annotations

import os
import re
from datetime import date
from typing import List, Optional

from docx import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from docscan.text.dates import long_date
from docscan.text.structure import PARAGRAPH_INDENT, SECTION_RULE, SUBHEADING_INDENT, TITLE_RULE

FOOTER_TEMPLATE = "Generated by DocScan - {date}"

_BLOCK_SPLIT_RE = re.compile(r"\n[ \t]*\n")


def _is_rule(line: str, char: str) -> bool:
    return bool(line) and set(line) == {char}


def _split_blocks(text: str) -> List[str]:
    return [block for block in _BLOCK_SPLIT_RE.split(text.strip("\n")) if block.strip()]


def _add_lines(paragraph, lines: List[str]) -> None:
    run = paragraph.add_run()
    for i, line in enumerate(lines):
        if i:
            run.add_break()
        run.add_text(line)


def _add_block(d, block: str) -> None:
    lines = block.split("\n")
    if len(lines) == 2 and _is_rule(lines[1], TITLE_RULE):
        d.add_heading(lines[0].strip(), level=0)
        return
    if len(lines) == 2 and _is_rule(lines[1], SECTION_RULE):
        d.add_heading(lines[0].strip(), level=1)
        return
    if _is_rule(lines[0].strip(), SECTION_RULE):
        p = d.add_paragraph()
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = p.add_run(" ".join(line.strip() for line in lines[1:]))
        run.italic = True
        run.font.size = Pt(9)
        return
    if block.startswith("Date: "):
        p = d.add_paragraph()
        p.add_run(block.strip()).italic = True
        return
    if block.startswith(PARAGRAPH_INDENT):
        d.add_paragraph(" ".join(line.strip() for line in lines))
        return
    if block.startswith(SUBHEADING_INDENT) and len(lines) == 1:
        p = d.add_paragraph()
        p.add_run(block.strip()).bold = True
        return
    _add_lines(d.add_paragraph(), lines)


def write_docx(text: str, out_path: str, title: Optional[str] = None, today: Optional[date] = None) -> str:
    """Render formatted text into ``out_path``.

    Doxygen:
    - @param text: Output of one of the text formatters (or plain text).
    - @param out_path: Target .docx path; parent directories are created.
    - @param title: Optional heading placed before the text.
    - @param today: Date used in the page footer; defaults to today.
    - @return: ``out_path``.
    """
    d = DocxDocument()
    if title:
        d.add_heading(title, level=0)
    for block in _split_blocks(text):
        _add_block(d, block)

    footer = d.sections[0].footer
    fp = footer.paragraphs[0] if footer.paragraphs else footer.add_paragraph()
    fp.text = FOOTER_TEMPLATE.format(date=long_date(today))
    fp.alignment = WD_ALIGN_PARAGRAPH.CENTER

    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    d.save(out_path)
    return out_path
