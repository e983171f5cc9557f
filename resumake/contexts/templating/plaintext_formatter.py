"""
Plain-text rendition of a resume.

Used when LaTeX compilation fails: the fallback PDF carries this text, so it keeps
the content but none of the typesetting. Sections are emitted in input order.
"""

from typing import Iterable, List

from resumake.contexts.templating.assembler import HEADINGS
from resumake.contexts.templating.resume_data_structures import (
    AwardsSection,
    CertificationsSection,
    EducationSection,
    ExperienceEntry,
    ExperienceSection,
    HonorEntry,
    LeadershipSection,
    PersonalInfoSection,
    ProjectsSection,
    Section,
    SkillsSection,
    SummarySection,
)


def _joined(*parts: str, separator: str = " | ") -> str:
    return separator.join(part.strip() for part in parts if part and part.strip())


def _dates(start: str, end: str) -> str:
    if start and end:
        return f"{start} - {end}"
    return end or start


def _experience_lines(entry: ExperienceEntry) -> List[str]:
    lines = [_joined(entry.company, entry.location, separator=", ")]
    lines.append(_joined(entry.role, _dates(entry.start_date, entry.end_date)))
    if entry.additional_role:
        lines.append(entry.additional_role)
    lines.extend(f"- {bullet.strip()}" for bullet in entry.bullets if bullet.strip())
    return [line for line in lines if line]


def _honor_lines(entry: HonorEntry) -> List[str]:
    lines = [_joined(entry.title, entry.date), entry.issuer, entry.description]
    return [line for line in lines if line]


def _section_lines(section: Section) -> List[str]:
    if isinstance(section, SummarySection):
        return [section.text.strip()] if section.text.strip() else []

    lines: List[str] = []
    if isinstance(section, (ExperienceSection, LeadershipSection)):
        for entry in section.entries:
            lines.extend(_experience_lines(entry))
    elif isinstance(section, ProjectsSection):
        for entry in section.entries:
            lines.append(_joined(entry.name, entry.technologies, entry.link))
            if entry.description:
                lines.append(entry.description)
            lines.extend(f"- {b.strip()}" for b in entry.bullet_points if b.strip())
    elif isinstance(section, EducationSection):
        for entry in section.entries:
            degree = entry.degree
            if entry.field_of_study:
                degree = f"{degree} in {entry.field_of_study}"
            if entry.gpa:
                degree = f"{degree} (GPA: {entry.gpa})"
            lines.append(_joined(entry.institution, entry.location, separator=", "))
            lines.append(_joined(degree, _dates(entry.start_date, entry.end_date)))
    elif isinstance(section, SkillsSection):
        for category in section.categories:
            keywords = [k.strip() for k in category.keywords if k and k.strip()]
            if keywords:
                lines.append(f"{category.name}: {', '.join(keywords)}")
    elif isinstance(section, (CertificationsSection, AwardsSection)):
        for entry in section.entries:
            lines.extend(_honor_lines(entry))
    return [line for line in lines if line]


def to_plaintext(sections: Iterable[Section]) -> str:
    """
    Render sections as plain text: header, then one titled block per section.

    Args:
        sections: Ordered typed sections

    Returns:
        Newline-separated text; "" when nothing renders
    """
    sections = list(sections)
    blocks: List[str] = []

    for section in sections:
        if isinstance(section, PersonalInfoSection):
            info = section.content
            header = [info.full_name.strip()]
            header.append(
                _joined(info.location, info.phone, info.email, info.linkedin, info.github, info.website)
            )
            header = [line for line in header if line]
            if header:
                blocks.insert(0, "\n".join(header))
            break

    for section in sections:
        if section.kind is None or isinstance(section, PersonalInfoSection):
            continue
        lines = _section_lines(section)
        if lines:
            blocks.append("\n".join([HEADINGS[section.kind], *lines]))

    return "\n\n".join(blocks)
