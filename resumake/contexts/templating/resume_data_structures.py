"""
Resume Data Structures

Typed representation of a resume document as saved by the editor: an ordered list
of sections, each tagged with a kind from a closed set and carrying a payload whose
shape depends on that kind.

Parsing is lenient at the content level. Entries of the wrong shape are dropped,
missing text fields become "", and scalars of the wrong type are stringified, so a
partly malformed section still renders whatever is usable. Unrecognised kinds are
kept as UnknownSection and skipped downstream.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, ClassVar, Dict, List, Optional

from omegaconf import OmegaConf

from resumake.contexts.templating.exceptions import InvalidResumeStructureError
from resumake.utils.text_processing import as_text


class SectionKind(str, Enum):
    PERSONAL_INFO = "personal-info"
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    LEADERSHIP = "leadership"
    EDUCATION = "education"
    PROJECTS = "projects"
    SKILLS = "skills"
    CERTIFICATIONS = "certifications"
    AWARDS = "awards"


# Tags written by older editor versions
SECTION_KIND_ALIASES = {
    "professional-summary": SectionKind.SUMMARY,
    "career-objective": SectionKind.SUMMARY,
}


class DocumentStatus(str, Enum):
    DRAFT = "draft"
    COMPILING = "compiling"
    COMPILED = "compiled"
    FAILED = "failed"


# Content payloads


@dataclass
class PersonalInfo:
    full_name: str = ""
    title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    website: str = ""


@dataclass
class ExperienceEntry:
    """
    One position in an experience or leadership section.

    Attributes:
        company: Organisation name (left, bold)
        location: Location (right, bold)
        role: Role title (italic)
        start_date: Free-form start date as typed by the user
        end_date: Free-form end date ("Present", "2024", ...)
        additional_role: Optional second role line
        bullets: Bullet texts in order, blanks included (filtered at render time)
    """

    company: str = ""
    location: str = ""
    role: str = ""
    start_date: str = ""
    end_date: str = ""
    additional_role: str = ""
    bullets: List[str] = field(default_factory=list)


@dataclass
class EducationEntry:
    institution: str = ""
    location: str = ""
    degree: str = ""
    field_of_study: str = ""
    gpa: str = ""
    start_date: str = ""
    end_date: str = ""


@dataclass
class ProjectEntry:
    name: str = ""
    technologies: str = ""
    link: str = ""
    description: str = ""
    bullet_points: List[str] = field(default_factory=list)


@dataclass
class SkillCategory:
    name: str = ""
    keywords: List[str] = field(default_factory=list)


@dataclass
class HonorEntry:
    """A certification or an award; both share the title/issuer/date layout."""

    title: str = ""
    issuer: str = ""
    date: str = ""
    description: str = ""


# Section variants


@dataclass
class Section:
    """Base of the section tagged union. `kind` is fixed per subclass."""

    id: str
    kind: ClassVar[Optional[SectionKind]] = None


@dataclass
class PersonalInfoSection(Section):
    kind: ClassVar[SectionKind] = SectionKind.PERSONAL_INFO
    content: PersonalInfo = field(default_factory=PersonalInfo)


@dataclass
class SummarySection(Section):
    kind: ClassVar[SectionKind] = SectionKind.SUMMARY
    text: str = ""


@dataclass
class ExperienceSection(Section):
    kind: ClassVar[SectionKind] = SectionKind.EXPERIENCE
    entries: List[ExperienceEntry] = field(default_factory=list)


@dataclass
class LeadershipSection(Section):
    kind: ClassVar[SectionKind] = SectionKind.LEADERSHIP
    entries: List[ExperienceEntry] = field(default_factory=list)


@dataclass
class EducationSection(Section):
    kind: ClassVar[SectionKind] = SectionKind.EDUCATION
    entries: List[EducationEntry] = field(default_factory=list)


@dataclass
class ProjectsSection(Section):
    kind: ClassVar[SectionKind] = SectionKind.PROJECTS
    entries: List[ProjectEntry] = field(default_factory=list)


@dataclass
class SkillsSection(Section):
    kind: ClassVar[SectionKind] = SectionKind.SKILLS
    categories: List[SkillCategory] = field(default_factory=list)


@dataclass
class CertificationsSection(Section):
    kind: ClassVar[SectionKind] = SectionKind.CERTIFICATIONS
    entries: List[HonorEntry] = field(default_factory=list)


@dataclass
class AwardsSection(Section):
    kind: ClassVar[SectionKind] = SectionKind.AWARDS
    entries: List[HonorEntry] = field(default_factory=list)


@dataclass
class UnknownSection(Section):
    """A section whose tag is outside the closed set. Carried along, never rendered."""

    type_name: str = ""
    raw_content: Any = None


# Lenient payload readers


def _pick(data: Dict[str, Any], *keys: str) -> str:
    """First non-empty text value among keys (camelCase editor key first, then snake_case)."""
    for key in keys:
        value = as_text(data.get(key))
        if value:
            return value
    return ""


def _mappings(content: Any) -> List[Dict[str, Any]]:
    """Entries of a list-shaped payload that are mappings; anything else is dropped."""
    if not isinstance(content, list):
        return []
    return [item for item in content if isinstance(item, dict)]


def _texts(items: Any) -> List[str]:
    """Bullet-like lists: accepts [{"text": ...}] and bare strings."""
    if not isinstance(items, list):
        return []
    texts = []
    for item in items:
        if isinstance(item, dict):
            texts.append(as_text(item.get("text")))
        elif isinstance(item, str):
            texts.append(item)
    return texts


def _parse_experience_entries(content: Any) -> List[ExperienceEntry]:
    return [
        ExperienceEntry(
            company=_pick(item, "company"),
            location=_pick(item, "location"),
            role=_pick(item, "role"),
            start_date=_pick(item, "startDate", "start_date"),
            end_date=_pick(item, "endDate", "end_date"),
            additional_role=_pick(item, "additionalRole", "additional_role"),
            bullets=_texts(item.get("bullets")),
        )
        for item in _mappings(content)
    ]


def _parse_honor_entries(content: Any) -> List[HonorEntry]:
    return [
        HonorEntry(
            title=_pick(item, "title"),
            issuer=_pick(item, "issuer"),
            date=_pick(item, "date"),
            description=_pick(item, "description"),
        )
        for item in _mappings(content)
    ]


def _parse_personal_info(section_id: str, content: Any) -> Section:
    data = content if isinstance(content, dict) else {}
    info = PersonalInfo(
        full_name=_pick(data, "fullName", "full_name"),
        title=_pick(data, "title"),
        email=_pick(data, "email"),
        phone=_pick(data, "phone"),
        location=_pick(data, "location"),
        linkedin=_pick(data, "linkedin"),
        github=_pick(data, "github"),
        website=_pick(data, "website"),
    )
    return PersonalInfoSection(id=section_id, content=info)


def _parse_summary(section_id: str, content: Any) -> Section:
    if isinstance(content, dict):
        text = as_text(content.get("text"))
    else:
        text = as_text(content)
    return SummarySection(id=section_id, text=text)


def _parse_education(section_id: str, content: Any) -> Section:
    entries = [
        EducationEntry(
            institution=_pick(item, "institution"),
            location=_pick(item, "location"),
            degree=_pick(item, "degree"),
            field_of_study=_pick(item, "field", "field_of_study"),
            gpa=_pick(item, "gpa"),
            start_date=_pick(item, "startDate", "start_date"),
            end_date=_pick(item, "endDate", "end_date"),
        )
        for item in _mappings(content)
    ]
    return EducationSection(id=section_id, entries=entries)


def _parse_projects(section_id: str, content: Any) -> Section:
    entries = [
        ProjectEntry(
            name=_pick(item, "name"),
            technologies=_pick(item, "technologies"),
            link=_pick(item, "link"),
            description=_pick(item, "description"),
            bullet_points=_texts(item.get("bulletPoints", item.get("bullet_points"))),
        )
        for item in _mappings(content)
    ]
    return ProjectsSection(id=section_id, entries=entries)


def _parse_skills(section_id: str, content: Any) -> Section:
    raw_categories = content.get("categories") if isinstance(content, dict) else content
    categories = []
    for item in _mappings(raw_categories):
        keywords = item.get("keywords")
        categories.append(
            SkillCategory(
                name=_pick(item, "name"),
                keywords=[as_text(k) for k in keywords] if isinstance(keywords, list) else [],
            )
        )
    return SkillsSection(id=section_id, categories=categories)


SECTION_PARSERS: Dict[SectionKind, Callable[[str, Any], Section]] = {
    SectionKind.PERSONAL_INFO: _parse_personal_info,
    SectionKind.SUMMARY: _parse_summary,
    SectionKind.EXPERIENCE: lambda sid, c: ExperienceSection(
        id=sid, entries=_parse_experience_entries(c)
    ),
    SectionKind.LEADERSHIP: lambda sid, c: LeadershipSection(
        id=sid, entries=_parse_experience_entries(c)
    ),
    SectionKind.EDUCATION: _parse_education,
    SectionKind.PROJECTS: _parse_projects,
    SectionKind.SKILLS: _parse_skills,
    SectionKind.CERTIFICATIONS: lambda sid, c: CertificationsSection(
        id=sid, entries=_parse_honor_entries(c)
    ),
    SectionKind.AWARDS: lambda sid, c: AwardsSection(id=sid, entries=_parse_honor_entries(c)),
}


def resolve_section_kind(type_name: str) -> Optional[SectionKind]:
    """Map a section tag (including legacy aliases) to its kind, or None if unknown."""
    if type_name in SECTION_KIND_ALIASES:
        return SECTION_KIND_ALIASES[type_name]
    try:
        return SectionKind(type_name)
    except ValueError:
        return None


def parse_section(raw: Dict[str, Any], position: int = 0) -> Section:
    """
    Build a typed section from its editor representation.

    Args:
        raw: Mapping with "type", "content" and usually "id"
        position: Index in the document, used to name sections without an id

    Returns:
        The matching Section variant, or UnknownSection for unrecognised tags
    """
    if not isinstance(raw, dict):
        return UnknownSection(id=f"section-{position}", type_name="", raw_content=raw)

    section_id = as_text(raw.get("id")) or f"section-{position}"
    type_name = as_text(raw.get("type"))
    content = raw.get("content")

    kind = resolve_section_kind(type_name)
    if kind is None:
        return UnknownSection(id=section_id, type_name=type_name, raw_content=content)

    return SECTION_PARSERS[kind](section_id, content)


def parse_sections(raw_sections: Any) -> List[Section]:
    """
    Parse an ordered list of editor sections, preserving order.

    Raises:
        InvalidResumeStructureError: If raw_sections is not a list
    """
    if not isinstance(raw_sections, list):
        raise InvalidResumeStructureError("Sections array is required", payload=raw_sections)
    return [parse_section(raw, position) for position, raw in enumerate(raw_sections)]


@dataclass
class ResumeDocument:
    """
    A resume owned by exactly one user.

    Attributes:
        id: Document identifier
        sections: Ordered sections, as arranged by the owner
        template_id: Requested document template (None = default)
        title: Display title
        status: Lifecycle status
        artifact_key: Storage key of the latest compiled PDF, if any
        owner_id: Identifier of the owning user
    """

    id: str
    sections: List[Section] = field(default_factory=list)
    template_id: Optional[str] = None
    title: str = ""
    status: DocumentStatus = DocumentStatus.DRAFT
    artifact_key: Optional[str] = None
    owner_id: str = "anonymous"

    def __post_init__(self):
        if not self.title:
            self.title = self.derive_title()

    @property
    def personal_info(self) -> Optional[PersonalInfo]:
        """Payload of the first personal-info section, if any."""
        for section in self.sections:
            if isinstance(section, PersonalInfoSection):
                return section.content
        return None

    def derive_title(self) -> str:
        info = self.personal_info
        if info is not None and info.full_name:
            return f"{info.full_name}'s Resume"
        return "Untitled Resume"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResumeDocument":
        """
        Build a document from the editor's saved shape.

        Accepts {id, title, templateId, ownerId, status, artifactKey, sections}; the
        snake_case spellings of the same keys are accepted too.

        Raises:
            InvalidResumeStructureError: If data is not a mapping or sections is not a list
        """
        if not isinstance(data, dict):
            raise InvalidResumeStructureError("Resume document must be a mapping", payload=data)

        status_value = as_text(data.get("status")) or DocumentStatus.DRAFT.value
        try:
            status = DocumentStatus(status_value)
        except ValueError:
            status = DocumentStatus.DRAFT

        return cls(
            id=_pick(data, "id") or "untitled",
            sections=parse_sections(data.get("sections")),
            template_id=_pick(data, "templateId", "template_id") or None,
            title=_pick(data, "title"),
            status=status,
            artifact_key=_pick(data, "artifactKey", "artifact_key") or None,
            owner_id=_pick(data, "ownerId", "owner_id") or "anonymous",
        )


def load_resume_file(path: Path) -> ResumeDocument:
    """
    Load a saved resume document from YAML or JSON.

    Args:
        path: Document file; JSON is read by the YAML loader as-is

    Returns:
        Parsed ResumeDocument (id defaults to the file stem)

    Raises:
        FileNotFoundError: If path does not exist
        InvalidResumeStructureError: If the file does not hold a document mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Resume file not found: {path}")

    data = OmegaConf.to_container(OmegaConf.load(path), resolve=False)
    if isinstance(data, dict):
        data.setdefault("id", path.stem)
    return ResumeDocument.from_dict(data)
