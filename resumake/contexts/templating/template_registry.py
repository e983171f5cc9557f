"""
Template Registry

Two kinds of templates live in the templating context:

- Document templates (documents/<template_id>.tex): complete LaTeX skeletons with
  {{NAME}}-style placeholder tokens, filled by populate_template().
- Fragment templates (types/<kind>/template.tex.jinja): Jinja2 templates for a single
  entry (an experience position, a project, a skill line), rendered by the assembler.
"""

import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from jinja2 import Environment, FileSystemLoader, Template, TemplateNotFound

from resumake.config import TemplateConfig
from resumake.contexts.templating.defaults import DEFAULT_TEMPLATE_ID, EMBEDDED_TEMPLATE
from resumake.contexts.templating.latex_patterns import TemplateTokens
from resumake.contexts.templating.logger import _log_debug, _log_warning

TEMPLATING_CONTEXT_PATH = Path(__file__).resolve().parent
DOCUMENTS_PATH = TEMPLATING_CONTEXT_PATH / "documents"
TYPES_PATH = TEMPLATING_CONTEXT_PATH / "types"

TEMPLATE_SUFFIX = ".tex"
_VALID_TEMPLATE_ID = re.compile(r"^[A-Za-z0-9_-]+$")
_TOKEN_PATTERN = re.compile("|".join(re.escape(token) for token in TemplateTokens.all()))

FRAGMENT_FILE = "template.tex.jinja"


def _fragment_environment(types_path: Path) -> Environment:
    """
    Jinja2 environment for fragment templates.

    Delimiters are chosen so LaTeX braces and percent signs pass through untouched:
    <<< var >>>, <%% block %%>, <# comment #>. Whitespace is left exactly as written.
    """
    return Environment(
        loader=FileSystemLoader(str(types_path)),
        variable_start_string="<<<",
        variable_end_string=">>>",
        block_start_string="<%%",
        block_end_string="%%>",
        comment_start_string="<#",
        comment_end_string="#>",
        trim_blocks=False,
        lstrip_blocks=False,
        keep_trailing_newline=True,
    )


class TemplateRegistry:
    """
    Fragment templates keyed by entry kind, one file per kind:

        types/experience_entry/template.tex.jinja
        types/skill_category/template.tex.jinja
        ...

    Compiled templates are cached per registry instance.
    """

    def __init__(self, types_base_path: Optional[Path] = None):
        self.types_base_path = Path(types_base_path) if types_base_path else TYPES_PATH
        self.env = _fragment_environment(self.types_base_path)
        self._cache: Dict[str, Template] = {}

    def get_template(self, type_name: str) -> Template:
        """
        Compiled fragment template for an entry kind.

        Raises:
            TemplateNotFound: If types/<type_name>/template.tex.jinja does not exist
        """
        template = self._cache.get(type_name)
        if template is not None:
            return template

        relative = f"{type_name}/{FRAGMENT_FILE}"
        try:
            template = self.env.get_template(relative)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"No fragment template for '{type_name}' under {self.types_base_path}"
            ) from e

        _log_debug(f"Loaded fragment template {relative}")
        self._cache[type_name] = template
        return template

    def render(self, type_name: str, **context) -> str:
        """Render a fragment template; trailing newlines are stripped so callers control joins."""
        return self.get_template(type_name).render(**context).rstrip("\n")


class DocumentTemplateLoader:
    """
    Looks up document templates by id with a three-step fallback.

    1. documents/<template_id>.tex
    2. documents/<default_template_id>.tex
    3. the embedded minimal template

    load() never raises; a resume always gets a skeleton to render into.
    """

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        default_template_id: str = DEFAULT_TEMPLATE_ID,
    ):
        self.templates_dir = Path(templates_dir) if templates_dir else DOCUMENTS_PATH
        self.default_template_id = default_template_id
        self.loader = FileSystemLoader(str(self.templates_dir), encoding="utf-8")
        self.env = Environment(loader=self.loader)

    @classmethod
    def from_config(cls, config: TemplateConfig) -> "DocumentTemplateLoader":
        templates_dir = Path(config.templates_dir) if config.templates_dir else None
        return cls(templates_dir=templates_dir, default_template_id=config.default_template_id)

    def _read(self, template_id: str) -> Optional[str]:
        """Source of one template file, or None if it is missing or unreadable."""
        if not _VALID_TEMPLATE_ID.match(template_id or ""):
            _log_warning(f"Rejected template id {template_id!r}")
            return None
        try:
            source, _, _ = self.loader.get_source(self.env, f"{template_id}{TEMPLATE_SUFFIX}")
        except TemplateNotFound:
            return None
        except (OSError, UnicodeDecodeError) as e:
            _log_warning(f"Template {template_id} unreadable: {e}")
            return None
        return source

    def load(self, template_id: Optional[str] = None) -> str:
        """
        Return the LaTeX skeleton for template_id.

        Args:
            template_id: Requested template (None = default template)

        Returns:
            Template source; the embedded template if nothing on disk is usable
        """
        requested = template_id or self.default_template_id

        source = self._read(requested)
        if source is not None:
            _log_debug(f"Loaded template {requested} from {self.templates_dir}")
            return source

        if requested != self.default_template_id:
            _log_warning(
                f"Template {requested} not found, using default '{self.default_template_id}'"
            )
            source = self._read(self.default_template_id)
            if source is not None:
                return source

        _log_warning(
            f"Default template '{self.default_template_id}' unavailable, using embedded template"
        )
        return EMBEDDED_TEMPLATE

    def list_templates(self) -> List[str]:
        """Ids of the templates available on disk, sorted."""
        return sorted(
            name[: -len(TEMPLATE_SUFFIX)]
            for name in self.loader.list_templates()
            if name.endswith(TEMPLATE_SUFFIX) and "/" not in name
        )


def populate_template(template: str, fields: Mapping[str, str]) -> str:
    """
    Substitute the known placeholder tokens in a document template.

    Tokens are matched in a single pass, so inserted values are never rescanned:
    a value that happens to contain "{{SKILLS}}" is inserted verbatim. Values are
    inserted as-is; escaping is the caller's responsibility.

    Args:
        template: Document template source
        fields: Values keyed by token name ("NAME", "CONTACT", "SUMMARY",
                "EXPERIENCES", "SKILLS", "EDUCATION"); missing keys become ""

    Returns:
        Populated LaTeX source. Unknown tokens such as {{FOO}} are left untouched.
    """

    def _substitute(match: re.Match) -> str:
        key = match.group(0)[2:-2]
        return fields.get(key) or ""

    return _TOKEN_PATTERN.sub(_substitute, template)
