"""
RESUMAKE - structured resume sections to typeset PDF

Assembles a resume from ordered, typed sections, renders it to LaTeX, compiles it
with an external engine in an isolated workspace, and falls back to a minimal
byte-level PDF when the engine is unavailable or fails.

Architecture:
- Templating Context: escaping, section model, fragment assembly, template population
- Rendering Context: pdflatex compilation, workspace lifecycle, fallback PDF encoding
- Publishing Context: compile orchestration and the artifact storage boundary
"""

__version__ = "0.1.0"
