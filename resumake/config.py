"""
Configuration for the compilation pipeline.

Every component receives its configuration explicitly at construction time; nothing
in the contexts reads environment variables. Configuration files are YAML, merged
over the structured defaults below with OmegaConf:

    compiler:
      compiler: xelatex
      timeout_s: 45
    store:
      root: outs/artifacts

Examples:
    >>> config = load_config()                                    # defaults only
    >>> config = load_config(Path("configs/resumake.yaml"))       # file over defaults
    >>> config = load_config(overrides=["compiler.num_passes=1"]) # dotlist overrides
"""

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from omegaconf import OmegaConf


def _default_work_root() -> str:
    return str(Path(tempfile.gettempdir()) / "resumake-compile")


@dataclass
class CompilerConfig:
    """
    Settings for the LaTeX compilation worker.

    Attributes:
        compiler: Executable name or path of the typesetting engine
        num_passes: Number of engine passes (2 resolves cross-references)
        timeout_s: Hard wall-clock cap for each pass
        work_root: Directory under which per-request workspaces are created
        cleanup_delay_s: Grace period before a finished workspace is deleted
        log_excerpt_chars: Maximum length of the failure detail taken from the engine log
    """

    compiler: str = "pdflatex"
    num_passes: int = 2
    timeout_s: float = 30.0
    work_root: str = field(default_factory=_default_work_root)
    cleanup_delay_s: float = 5.0
    log_excerpt_chars: int = 1000


@dataclass
class TemplateConfig:
    """
    Settings for document template lookup.

    Attributes:
        templates_dir: Directory holding <template_id>.tex files (None = bundled templates)
        default_template_id: Template used when the requested one is missing
    """

    templates_dir: Optional[str] = None
    default_template_id: str = "professional"


@dataclass
class StoreConfig:
    """
    Settings for the local artifact store and signed URL issuance.

    Attributes:
        root: Directory that backs the store
        signing_secret: HMAC secret for signed URLs
        signed_url_ttl_s: Lifetime of issued URLs
    """

    root: str = "outs/artifacts"
    signing_secret: str = "change-me"
    signed_url_ttl_s: int = 3600


@dataclass
class ResumakeConfig:
    compiler: CompilerConfig = field(default_factory=CompilerConfig)
    templates: TemplateConfig = field(default_factory=TemplateConfig)
    store: StoreConfig = field(default_factory=StoreConfig)


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[List[str]] = None,
) -> ResumakeConfig:
    """
    Build a ResumakeConfig from defaults, an optional YAML file and dotlist overrides.

    Later sources override earlier ones. Unknown keys are rejected by the structured
    schema, so typos in a config file fail loudly instead of being ignored.

    Args:
        config_path: Optional YAML file
        overrides: Optional dotlist entries (e.g., ["compiler.timeout_s=10"])

    Returns:
        Fully typed configuration

    Raises:
        FileNotFoundError: If config_path is given but does not exist
    """
    merged = OmegaConf.structured(ResumakeConfig)

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        merged = OmegaConf.merge(merged, OmegaConf.load(config_path))

    if overrides:
        merged = OmegaConf.merge(merged, OmegaConf.from_dotlist(list(overrides)))

    return OmegaConf.to_object(merged)
