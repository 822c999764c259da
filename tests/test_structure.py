from datetime import date

from docscan.text.structure import (
    extract_title,
    has_document_structure,
    is_section_header,
    organize_sections,
    structure_as_document,
    wrap_paragraph,
)

TODAY = date(2026, 10, 18)
FOOTER = "─" * 50 + "\nEnd of Document"


def test_has_document_structure():
    assert has_document_structure("a\n\nb\n\nc")
    assert has_document_structure("Notes\nSee the summary below")
    assert not has_document_structure("just one line")
    assert not has_document_structure("x" * 120 + "\nintroduction")


def test_extract_title():
    assert extract_title(["Annual Plan", "body"]) == "Annual Plan"
    assert extract_title(["This is a very long first sentence."]) == "This is a very long"
    assert extract_title([]) == "Untitled Document"


def test_is_section_header():
    assert is_section_header("Results")
    assert is_section_header("Part two")
    assert not is_section_header("Lunch menu")
    assert not is_section_header("Results " + "x" * 60)


def test_organize_sections_splits_on_headers():
    lines = ["Background", "one.", "Results", "two."]
    assert organize_sections(lines) == [["Background", "one."], ["Results", "two."]]


def test_wrap_paragraph_indents_first_line_only():
    text = " ".join(["word"] * 60)
    wrapped = wrap_paragraph(text).split("\n")
    assert wrapped[0].startswith("    word")
    assert all(len(line) <= 80 for line in wrapped)
    assert all(not line.startswith(" ") for line in wrapped[1:])


def test_convert_plain_text():
    text = "Quarterly figures for the team\nthe numbers went up.\nWe hired two people."
    title = "Quarterly figures for the team"
    expected = (
        f"{title.upper()}\n{'=' * len(title)}\n\nDate: October 18, 2026\n\n"
        "    the numbers went up.\n\n"
        "    We hired two people.\n\n" + FOOTER
    )
    assert structure_as_document(text, TODAY) == expected


def test_convert_with_sections():
    text = "Notes\nBackground\nThis is the start\nof a long thought.\nResults\nIt worked."
    expected = (
        "NOTES\n=====\n\nDate: October 18, 2026\n\n"
        "BACKGROUND\n" + "─" * 10 + "\n\n"
        "    This is the start of a long thought.\n\n"
        "RESULTS\n" + "─" * 7 + "\n\n"
        "    It worked.\n\n" + FOOTER
    )
    assert structure_as_document(text, TODAY) == expected


def test_convert_subheading_indented():
    text = "Memo\nSteps:\nOpen the door."
    out = structure_as_document(text, TODAY)
    assert "\n\n  Steps:\n\n    Open the door.\n\n" in out


def test_convert_sentence_title_keeps_first_line_in_body():
    text = "This is a very long first sentence that ends here."
    out = structure_as_document(text, TODAY)
    assert out.startswith("THIS IS A VERY LONG\n" + "=" * 19 + "\n\n")
    assert "    This is a very long first sentence that ends here." in out


def test_enhance_existing_document():
    text = "Quarterly Report\n\nThis is the body.\n\nIntroduction\nMore text."
    assert structure_as_document(text, TODAY) == (
        "QUARTERLY REPORT\n" + "=" * 16 + "\n\nDate: October 18, 2026\n\n"
        "This is the body.\n\nINTRODUCTION\nMore text."
    )


def test_enhance_splits_run_on_sentences():
    text = "Project Plan\nIntroduction\nWe start here.Then we continue.\nConclusion\nDone."
    assert structure_as_document(text, TODAY) == (
        "PROJECT PLAN\n" + "=" * 12 + "\n\nDate: October 18, 2026\n\n"
        "INTRODUCTION\nWe start here.\n\nThen we continue.\nCONCLUSION\nDone."
    )


def test_empty_input_gives_untitled_skeleton():
    assert structure_as_document("", TODAY) == (
        "UNTITLED DOCUMENT\n" + "=" * 17 + "\n\nDate: October 18, 2026\n\n" + FOOTER
    )
