"""
Rendering Context

Responsibilities:
- Compiles LaTeX source to PDF bytes in isolated workspaces
- Kills engine runs that exceed their timeout
- Schedules workspace removal after every compilation
- Encodes a plain-text PDF when typesetting is unavailable

Owns: LaTeX compilation, workspaces, fallback PDF encoding
Never: Modifies template content or talks to storage
"""

from resumake.contexts.rendering.compiler import (
    CompilationRequest,
    CompilationResult,
    LatexCompiler,
)
from resumake.contexts.rendering.fallback_pdf import encode_minimal_pdf
from resumake.contexts.rendering.workspace import WorkspaceJanitor, create_workspace

__all__ = [
    "CompilationRequest",
    "CompilationResult",
    "LatexCompiler",
    "encode_minimal_pdf",
    "WorkspaceJanitor",
    "create_workspace",
]
