"""
Templating Context

Responsibilities:
- Represents resume documents as ordered, typed sections
- Escapes user text for LaTeX
- Assembles section content into template fragments
- Loads document templates (with fallbacks) and populates their placeholders

Owns: Resume structure representation, LaTeX fragment generation, template system
Never: Runs the typesetting engine or touches storage
"""

from resumake.contexts.templating.assembler import AssembledFields, ResumeAssembler
from resumake.contexts.templating.exceptions import InvalidResumeStructureError
from resumake.contexts.templating.latex_escaping import escape_latex, escape_url
from resumake.contexts.templating.plaintext_formatter import to_plaintext
from resumake.contexts.templating.resume_data_structures import (
    DocumentStatus,
    ResumeDocument,
    SectionKind,
    load_resume_file,
    parse_section,
    parse_sections,
)
from resumake.contexts.templating.template_registry import (
    DocumentTemplateLoader,
    TemplateRegistry,
    populate_template,
)

__all__ = [
    # Escaping and assembly
    "escape_latex",
    "escape_url",
    "ResumeAssembler",
    "AssembledFields",
    "to_plaintext",
    # Templates
    "DocumentTemplateLoader",
    "TemplateRegistry",
    "populate_template",
    # Data structures
    "ResumeDocument",
    "DocumentStatus",
    "SectionKind",
    "parse_section",
    "parse_sections",
    "load_resume_file",
    "InvalidResumeStructureError",
]
