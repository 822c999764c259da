from datetime import date

from docscan.text.letter import format_as_letter, has_letter_structure

TODAY = date(2026, 10, 18)


def test_has_letter_structure_is_case_sensitive():
    assert has_letter_structure("Dear Sam,\nBest Regards")
    assert not has_letter_structure("dear Sam,\nsincerely")


def test_existing_letter_gets_date_before_salutation():
    text = "Dear Sir,\nI apply.\n\n\n\nSincerely,\nJane"
    assert format_as_letter(text, TODAY) == (
        "October 18, 2026\n\nDear Sir,\nI apply.\n\nSincerely,\nJane"
    )


def test_existing_letter_with_current_month_untouched():
    text = "Meeting on October 2\nDear Sir,\nThanks.\nRegards,\nJo"
    assert format_as_letter(text, TODAY) == text


def test_existing_letter_date_on_own_line():
    text = "Jane Doe\nDear Sir, I apply.\nSincerely,\nJane"
    assert format_as_letter(text, TODAY) == (
        "Jane Doe\nOctober 18, 2026\n\nDear Sir, I apply.\nSincerely,\nJane"
    )


def test_plain_text_converted_with_header_and_signature():
    text = (
        "Jane Doe\njane@mail.com\n555-123-4567\n"
        "I am writing to apply for the role.\nI have five years of experience."
    )
    assert format_as_letter(text, TODAY) == (
        "Jane Doe\njane@mail.com\n555-123-4567\n\n"
        "October 18, 2026\n\n"
        "Dear Hiring Manager,\n\n"
        "I am writing to apply for the role.\nI have five years of experience.\n\n"
        "Sincerely,\n\n"
        "Jane Doe"
    )


def test_plain_text_without_header():
    assert format_as_letter("I am writing to apply.", TODAY) == (
        "October 18, 2026\n\nDear Hiring Manager,\n\nI am writing to apply.\n\nSincerely,\n\n"
    )


def test_existing_salutation_and_closing_not_duplicated():
    text = "Thanks, my dear friend.\nBest regards"
    assert format_as_letter(text, TODAY) == "October 18, 2026\n\nThanks, my dear friend.\nBest regards"


def test_header_only_text_repeats_lines_in_body():
    assert format_as_letter("Jane Doe\n555 0100", TODAY) == (
        "Jane Doe\n555 0100\n\nOctober 18, 2026\n\nDear Hiring Manager,\n\n"
        "Jane Doe\n555 0100\n\nSincerely,\n\nJane Doe"
    )


def test_single_short_line_kept_in_body():
    line = "I am applying for the analyst role"
    assert format_as_letter(line, TODAY) == (
        f"{line}\n\nOctober 18, 2026\n\nDear Hiring Manager,\n\n{line}\n\nSincerely,\n\n{line}"
    )


def test_empty_input_never_raises():
    out = format_as_letter("", TODAY)
    assert "October 18, 2026" in out
