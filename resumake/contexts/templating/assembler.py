"""
Document Assembler

Maps an ordered list of typed sections onto the named fragments a document
template expects (name, contact, summary, experiences, skills, education).

Layout rules:
- experience, leadership and projects share the "experiences" fragment, one block
  per kind, ordered by where each kind first appears in the input;
- education, certifications and awards share the "education" fragment, always in
  that order;
- every free-text value is escaped; headings, rules, list markup and spacing are
  inserted as raw LaTeX.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from resumake.contexts.templating.defaults import DEFAULT_NAME, SECTION_BREAK, SPACING
from resumake.contexts.templating.latex_escaping import escape_latex, escape_url
from resumake.contexts.templating.latex_patterns import FormattingPatterns, SectionHeadings
from resumake.contexts.templating.logger import _log_debug
from resumake.contexts.templating.resume_data_structures import (
    AwardsSection,
    CertificationsSection,
    EducationEntry,
    EducationSection,
    ExperienceEntry,
    ExperienceSection,
    HonorEntry,
    LeadershipSection,
    PersonalInfo,
    PersonalInfoSection,
    ProjectEntry,
    ProjectsSection,
    Section,
    SectionKind,
    SkillCategory,
    SkillsSection,
    SummarySection,
)
from resumake.contexts.templating.template_registry import TemplateRegistry

# Fixed order of the blocks inside the education fragment
EDUCATION_BLOCK_ORDER = (
    SectionKind.EDUCATION,
    SectionKind.CERTIFICATIONS,
    SectionKind.AWARDS,
)

HEADINGS = {
    SectionKind.SUMMARY: SectionHeadings.SUMMARY,
    SectionKind.EXPERIENCE: SectionHeadings.EXPERIENCE,
    SectionKind.LEADERSHIP: SectionHeadings.LEADERSHIP,
    SectionKind.PROJECTS: SectionHeadings.PROJECTS,
    SectionKind.SKILLS: SectionHeadings.SKILLS,
    SectionKind.EDUCATION: SectionHeadings.EDUCATION,
    SectionKind.CERTIFICATIONS: SectionHeadings.CERTIFICATIONS,
    SectionKind.AWARDS: SectionHeadings.AWARDS,
}


@dataclass
class AssembledFields:
    """
    LaTeX fragments ready for template population.

    Attributes:
        name: Escaped full name (or the default placeholder)
        contact: Escaped contact values joined by a bullet separator
        summary: Summary block, or ""
        experience: Experience, leadership and project blocks, or ""
        skills: Skills block, or ""
        education: Education, certification and award blocks, or ""
    """

    name: str = DEFAULT_NAME
    contact: str = ""
    summary: str = ""
    experience: str = ""
    skills: str = ""
    education: str = ""

    def as_template_fields(self) -> Dict[str, str]:
        """Values keyed by document template token name."""
        return {
            "NAME": self.name,
            "CONTACT": self.contact,
            "SUMMARY": self.summary,
            "EXPERIENCES": self.experience,
            "SKILLS": self.skills,
            "EDUCATION": self.education,
        }


def format_date_range(start_date: str, end_date: str) -> str:
    """'start - end', or whichever side exists, escaped."""
    if start_date and end_date:
        return f"{escape_latex(start_date)} - {escape_latex(end_date)}"
    return escape_latex(end_date or start_date)


def format_degree(degree: str, field_of_study: str = "", gpa: str = "") -> str:
    """'{degree} in {field} (GPA: {gpa})' with the optional parts omitted, escaped."""
    result = escape_latex(degree)
    if field_of_study:
        result += f" in {escape_latex(field_of_study)}"
    if gpa:
        result += f" (GPA: {escape_latex(gpa)})"
    return result


def format_contact(info: PersonalInfo) -> str:
    """Non-empty contact values in fixed order: location, phone, email, then links."""
    values = [
        info.location,
        info.phone,
        info.email,
        info.linkedin,
        info.github,
        info.website,
    ]
    return FormattingPatterns.BULLET_SEPARATOR.join(
        escape_latex(value.strip()) for value in values if value and value.strip()
    )


def _non_blank(texts: Iterable[str]) -> List[str]:
    return [text for text in texts if text and text.strip()]


class ResumeAssembler:
    """Converts typed resume sections into template fragments."""

    def __init__(self, template_registry: Optional[TemplateRegistry] = None):
        self.template_registry = template_registry or TemplateRegistry()

    def _heading(self, kind: SectionKind) -> str:
        heading = self.template_registry.render(
            "section_heading", heading=HEADINGS[kind], **SPACING
        )
        return f"{heading}\n\n"

    def _join_entries(self, entries: List[str], gap_key: str) -> str:
        separator = f"\n{FormattingPatterns.VSPACE}{{{SPACING[gap_key]}}}\n\n"
        return separator.join(entries)

    def render_experience_entry(self, entry: ExperienceEntry) -> str:
        """
        Render one experience or leadership position.

        Blank bullets are dropped; if none remain the itemize list is omitted.
        """
        return self.template_registry.render(
            "experience_entry",
            company=escape_latex(entry.company),
            location=escape_latex(entry.location),
            role=escape_latex(entry.role),
            dates=format_date_range(entry.start_date, entry.end_date),
            additional_role=escape_latex(entry.additional_role),
            bullets=[escape_latex(bullet) for bullet in _non_blank(entry.bullets)],
            **SPACING,
        )

    def render_project_entry(self, entry: ProjectEntry) -> str:
        return self.template_registry.render(
            "project_entry",
            name=escape_latex(entry.name),
            link=escape_url(entry.link),
            technologies=escape_latex(entry.technologies),
            description=escape_latex(entry.description),
            bullet_points=[escape_latex(bullet) for bullet in _non_blank(entry.bullet_points)],
            **SPACING,
        )

    def render_education_entry(self, entry: EducationEntry) -> str:
        return self.template_registry.render(
            "education_entry",
            institution=escape_latex(entry.institution),
            location=escape_latex(entry.location),
            degree_line=format_degree(entry.degree, entry.field_of_study, entry.gpa),
            dates=format_date_range(entry.start_date, entry.end_date),
            **SPACING,
        )

    def render_honor_entry(self, entry: HonorEntry) -> str:
        return self.template_registry.render(
            "honor_entry",
            title=escape_latex(entry.title),
            date=escape_latex(entry.date),
            issuer=escape_latex(entry.issuer),
            description=escape_latex(entry.description),
            **SPACING,
        )

    def render_skill_category(self, category: SkillCategory) -> Optional[str]:
        """One 'Category: a, b' line, or None when the category has no keywords."""
        keywords = [escape_latex(keyword.strip()) for keyword in _non_blank(category.keywords)]
        if not keywords:
            return None
        return self.template_registry.render(
            "skill_category", name=escape_latex(category.name), keywords=keywords
        )

    def _experience_block(self, section: Section) -> str:
        if isinstance(section, ProjectsSection):
            entries = [self.render_project_entry(entry) for entry in section.entries]
            gap_key = "project_entry_gap"
        else:
            entries = [self.render_experience_entry(entry) for entry in section.entries]
            gap_key = "experience_entry_gap"
        if not entries:
            return ""
        return self._heading(section.kind) + self._join_entries(entries, gap_key)

    def _education_block(self, section: Section) -> str:
        if isinstance(section, EducationSection):
            entries = [self.render_education_entry(entry) for entry in section.entries]
            gap_key = "education_entry_gap"
        else:
            entries = [self.render_honor_entry(entry) for entry in section.entries]
            gap_key = "cert_item_gap"
        if not entries:
            return ""
        return self._heading(section.kind) + self._join_entries(entries, gap_key)

    def _skills_block(self, section: SkillsSection) -> str:
        lines = [
            line
            for line in (self.render_skill_category(c) for c in section.categories)
            if line is not None
        ]
        if not lines:
            return ""
        separator = f"{FormattingPatterns.LINEBREAK}[{SPACING['skill_category_gap']}]\n"
        return self._heading(SectionKind.SKILLS) + separator.join(lines) + "\n"

    def _summary_block(self, section: SummarySection) -> str:
        if not section.text.strip():
            return ""
        return (
            self._heading(SectionKind.SUMMARY)
            + escape_latex(section.text)
            + f"{FormattingPatterns.LINEBREAK}[0.2em]"
        )

    def assemble(self, sections: Iterable[Section]) -> AssembledFields:
        """
        Assemble template fragments from sections in a single left-to-right pass.

        Args:
            sections: Ordered typed sections

        Returns:
            AssembledFields; fragments for absent sections are empty strings
        """
        fields = AssembledFields()
        personal_info_seen = False
        summary_blocks: List[str] = []
        skills_blocks: List[str] = []
        # Insertion order of the dict records first occurrence of each kind
        career_blocks: Dict[SectionKind, List[str]] = {}
        education_blocks: Dict[SectionKind, List[str]] = {
            kind: [] for kind in EDUCATION_BLOCK_ORDER
        }

        for section in sections:
            if isinstance(section, PersonalInfoSection):
                if personal_info_seen:
                    _log_debug(f"Ignoring additional personal-info section {section.id}")
                    continue
                personal_info_seen = True
                info = section.content
                if info.full_name.strip():
                    fields.name = escape_latex(info.full_name.strip())
                fields.contact = format_contact(info)

            elif isinstance(section, SummarySection):
                block = self._summary_block(section)
                if block:
                    summary_blocks.append(block)

            elif isinstance(section, (ExperienceSection, LeadershipSection, ProjectsSection)):
                block = self._experience_block(section)
                if block:
                    career_blocks.setdefault(section.kind, []).append(block)

            elif isinstance(section, (EducationSection, CertificationsSection, AwardsSection)):
                block = self._education_block(section)
                if block:
                    education_blocks[section.kind].append(block)

            elif isinstance(section, SkillsSection):
                block = self._skills_block(section)
                if block:
                    skills_blocks.append(block)

            else:
                _log_debug(f"Skipping section {section.id} of unsupported type")

        fields.summary = SECTION_BREAK.join(summary_blocks)
        fields.experience = SECTION_BREAK.join(
            block for blocks in career_blocks.values() for block in blocks
        )
        fields.skills = SECTION_BREAK.join(skills_blocks)
        fields.education = SECTION_BREAK.join(
            block for kind in EDUCATION_BLOCK_ORDER for block in education_blocks[kind]
        )
        return fields
