"""
LaTeX Pattern Constants

Centralized LaTeX strings used when generating documents.
Organized into frozen dataclasses by category for immutability and clear grouping.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class TemplateTokens:
    """
    Placeholder tokens recognised in document templates.

    Only these tokens are substituted; any other {{...}} text is left untouched.
    """
    NAME: str = "{{NAME}}"
    CONTACT: str = "{{CONTACT}}"
    SUMMARY: str = "{{SUMMARY}}"
    EXPERIENCES: str = "{{EXPERIENCES}}"
    SKILLS: str = "{{SKILLS}}"
    EDUCATION: str = "{{EDUCATION}}"

    @classmethod
    def all(cls) -> List[str]:
        """Return every recognised token, in template order."""
        return [
            cls.NAME,
            cls.CONTACT,
            cls.SUMMARY,
            cls.EXPERIENCES,
            cls.SKILLS,
            cls.EDUCATION,
        ]


@dataclass(frozen=True)
class SectionHeadings:
    """Headings printed above each block of the document body."""
    SUMMARY: str = "PROFESSIONAL SUMMARY"
    EXPERIENCE: str = "PROFESSIONAL EXPERIENCE"
    LEADERSHIP: str = "LEADERSHIP EXPERIENCE"
    PROJECTS: str = "PROJECTS"
    SKILLS: str = "SKILLS"
    EDUCATION: str = "EDUCATION"
    CERTIFICATIONS: str = "CERTIFICATIONS"
    AWARDS: str = "AWARDS"


@dataclass(frozen=True)
class EnvironmentPatterns:
    """List environments used for bullets and project entries."""
    BEGIN_ITEMIZE: str = r"\begin{itemize}"
    END_ITEMIZE: str = r"\end{itemize}"
    ITEM: str = r"\item"


@dataclass(frozen=True)
class FormattingPatterns:
    """LaTeX formatting commands used around escaped text."""
    TEXTBF: str = r"\textbf"
    TEXTIT: str = r"\textit"
    HFILL: str = r"\hfill"
    VSPACE: str = r"\vspace"
    HREF: str = r"\href"
    LINEBREAK: str = r"\\"
    BULLET_SEPARATOR: str = r" $\bullet$ "
