"""Unit tests for the plain-text rendition used by the fallback PDF."""

import pytest

from resumake.contexts.templating.plaintext_formatter import to_plaintext
from resumake.contexts.templating.resume_data_structures import parse_sections


@pytest.mark.unit
def test_empty_document():
    assert to_plaintext([]) == ""


@pytest.mark.unit
def test_header_first_even_if_personal_info_is_last():
    sections = parse_sections(
        [
            {"id": "s", "type": "summary", "content": {"text": "Builder of things"}},
            {
                "id": "p",
                "type": "personal-info",
                "content": {"fullName": "Jane Doe", "email": "jane@example.com", "location": "NYC"},
            },
        ]
    )
    text = to_plaintext(sections)

    assert text.splitlines()[:2] == ["Jane Doe", "NYC | jane@example.com"]
    assert "PROFESSIONAL SUMMARY\nBuilder of things" in text


@pytest.mark.unit
def test_text_is_not_escaped():
    """Plain text keeps reserved LaTeX characters as typed."""
    sections = parse_sections([{"id": "s", "type": "summary", "content": {"text": "R&D 100%"}}])

    assert to_plaintext(sections).endswith("R&D 100%")


@pytest.mark.unit
def test_experience_lines():
    sections = parse_sections(
        [
            {
                "id": "e",
                "type": "experience",
                "content": [
                    {
                        "company": "Acme",
                        "location": "Boston",
                        "role": "Engineer",
                        "startDate": "2020",
                        "endDate": "Present",
                        "bullets": [{"text": "Built X"}, {"text": " "}],
                    }
                ],
            }
        ]
    )

    assert to_plaintext(sections) == (
        "PROFESSIONAL EXPERIENCE\n"
        "Acme, Boston\n"
        "Engineer | 2020 - Present\n"
        "- Built X"
    )


@pytest.mark.unit
def test_skills_and_education():
    sections = parse_sections(
        [
            {"id": "s", "type": "skills", "content": {"categories": [{"name": "Lang", "keywords": ["Python"]}]}},
            {"id": "ed", "type": "education", "content": [{"institution": "MIT", "degree": "BS", "field": "CS"}]},
        ]
    )
    text = to_plaintext(sections)

    assert "SKILLS\nLang: Python" in text
    assert "EDUCATION\nMIT\nBS in CS" in text


@pytest.mark.unit
def test_sections_without_content_skipped():
    sections = parse_sections(
        [
            {"id": "e", "type": "experience", "content": []},
            {"id": "x", "type": "hobbies", "content": ["chess"]},
        ]
    )

    assert to_plaintext(sections) == ""
