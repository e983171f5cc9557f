"""
Publishing Context

Responsibilities:
- Orchestrates a document from sections to a stored, signed PDF
- Falls back to a plain-text PDF when compilation fails
- Stores artifacts under deterministic keys and issues signed URLs
- Deletes artifacts when their document goes away

Owns: Artifact storage boundary, compile orchestration
Never: Generates LaTeX fragments or runs the engine directly
"""

from resumake.contexts.publishing.artifact_store import (
    ArtifactStore,
    CompiledArtifact,
    LocalArtifactStore,
    StorageError,
    artifact_key,
)
from resumake.contexts.publishing.pipeline import CompileOutcome, CompileReport, ResumePipeline

__all__ = [
    "ArtifactStore",
    "CompiledArtifact",
    "LocalArtifactStore",
    "StorageError",
    "artifact_key",
    "CompileOutcome",
    "CompileReport",
    "ResumePipeline",
]
