"""
Resume compile pipeline.

Takes a ResumeDocument from structured sections to a stored, signed PDF:

    sections -> fragments -> LaTeX source -> PDF bytes -> upload -> signed URL

If the typesetting engine fails, the document's plain-text rendition is encoded
as a minimal PDF instead, so the owner always receives a PDF unless storage
itself fails.

Examples:
    >>> pipeline = ResumePipeline(config, LocalArtifactStore.from_config(config.store))
    >>> report = pipeline.compile_document(ResumeDocument.from_dict(data))
    >>> report.status, report.url
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from resumake.config import ResumakeConfig
from resumake.contexts.publishing.artifact_store import (
    ArtifactStore,
    CompiledArtifact,
    StorageError,
    artifact_key,
)
from resumake.contexts.publishing.logger import (
    _log_debug,
    _log_error,
    _log_info,
    _log_success,
    _log_warning,
)
from resumake.contexts.rendering.compiler import (
    CompilationRequest,
    CompilationResult,
    LatexCompiler,
)
from resumake.contexts.rendering.fallback_pdf import encode_minimal_pdf
from resumake.contexts.templating.assembler import ResumeAssembler
from resumake.contexts.templating.plaintext_formatter import to_plaintext
from resumake.contexts.templating.resume_data_structures import DocumentStatus, ResumeDocument
from resumake.contexts.templating.template_registry import (
    DocumentTemplateLoader,
    populate_template,
)
from resumake.utils.text_processing import set_max_consecutive_blank_lines

COMPILE_FAILED_ERROR = "LaTeX compilation failed"
MISSING_INPUT_ERROR = "latex_source and file_name are required"
UPLOAD_FAILED_ERROR = "Failed to upload PDF"
SIGNING_FAILED_ERROR = "Failed to create signed URL"

FALLBACK_TITLE = "Resume - LaTeX Compilation Failed"
FALLBACK_SUBTITLE = "Plain text version:"
FALLBACK_EMPTY_TEXT = "Resume content unavailable"


def fallback_text(plain_text: str) -> str:
    """Text drawn on the fallback PDF: a fixed header followed by the resume text."""
    body = plain_text if plain_text and plain_text.strip() else FALLBACK_EMPTY_TEXT
    return f"{FALLBACK_TITLE}\n{FALLBACK_SUBTITLE}\n\n{body}"


@dataclass
class CompileOutcome:
    """
    Result at the compile invocation boundary: PDF bytes or an error with details.

    Attributes:
        pdf_bytes: Compiled PDF (None on failure)
        error: Short error label (None on success)
        details: Bounded failure detail
        result: Underlying CompilationResult, when the engine was run
    """

    pdf_bytes: Optional[bytes] = None
    error: Optional[str] = None
    details: str = ""
    result: Optional[CompilationResult] = None

    @property
    def success(self) -> bool:
        return self.pdf_bytes is not None

    def to_response(self) -> Union[bytes, Dict[str, str]]:
        """PDF bytes on success, else {"error": ..., "details": ...} (details only when set)."""
        if self.success:
            return self.pdf_bytes
        response = {"error": self.error or COMPILE_FAILED_ERROR}
        if self.details:
            response["details"] = self.details
        return response


@dataclass
class CompileReport:
    """
    Outcome of compiling and publishing one document.

    Attributes:
        document_id: Document that was compiled
        status: COMPILED when a PDF was stored and signed, FAILED otherwise
        storage_key: Key the PDF was stored under
        url: Signed URL of the stored PDF
        used_fallback: True if the stored PDF is the plain-text fallback
        cached: True if an already stored artifact was re-signed without compiling
        error: Short error label for failed reports
        details: Failure detail (compile log excerpt or storage error)
        warnings: LaTeX warnings from the compilation
    """

    document_id: str
    status: DocumentStatus
    storage_key: Optional[str] = None
    url: Optional[str] = None
    used_fallback: bool = False
    cached: bool = False
    error: Optional[str] = None
    details: str = ""
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "documentId": self.document_id,
            "status": self.status.value,
            "storageKey": self.storage_key,
        }
        if self.url:
            data["pdfUrl"] = self.url
        if self.used_fallback:
            data["usedFallback"] = True
        if self.error:
            data["error"] = self.error
            data["details"] = self.details
        return data


class ResumePipeline:
    """
    Orchestrates assembly, compilation, fallback and publishing.

    Holds no per-document state, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        config: ResumakeConfig,
        store: Optional[ArtifactStore] = None,
        compiler: Optional[LatexCompiler] = None,
        templates: Optional[DocumentTemplateLoader] = None,
        assembler: Optional[ResumeAssembler] = None,
    ):
        self.config = config
        self.store = store
        self.compiler = compiler or LatexCompiler(config.compiler)
        self.templates = templates or DocumentTemplateLoader.from_config(config.templates)
        self.assembler = assembler or ResumeAssembler()

    def build_source(self, document: ResumeDocument) -> str:
        """Complete LaTeX source for a document."""
        fields = self.assembler.assemble(document.sections)
        template = self.templates.load(document.template_id)
        # Empty fragments leave runs of blank lines behind
        return set_max_consecutive_blank_lines(
            populate_template(template, fields.as_template_fields())
        )

    def compile_source(self, source: str, name: str) -> CompileOutcome:
        """
        Compile LaTeX source under a workspace base name.

        Args:
            source: Complete LaTeX document
            name: Workspace base name (e.g., "resume_<document id>")

        Returns:
            CompileOutcome with PDF bytes, or with error and details
        """
        if not source or not source.strip() or not name or not name.strip():
            return CompileOutcome(error=MISSING_INPUT_ERROR)

        result = self.compiler.compile(CompilationRequest(source=source, workspace_name=name))
        if result.success:
            return CompileOutcome(pdf_bytes=result.pdf_bytes, result=result)
        return CompileOutcome(error=COMPILE_FAILED_ERROR, details=result.details, result=result)

    def _require_store(self) -> ArtifactStore:
        if self.store is None:
            raise ValueError("ResumePipeline was created without an artifact store")
        return self.store

    def _resign(self, document: ResumeDocument) -> Optional[CompileReport]:
        """Signed URL for an already stored artifact, or None if it cannot be reused."""
        store = self._require_store()
        try:
            url = store.signed_url(document.artifact_key, self.config.store.signed_url_ttl_s)
        except StorageError as e:
            _log_debug(f"Stored artifact {document.artifact_key} not reusable: {e}")
            return None
        _log_info(f"Reusing stored artifact {document.artifact_key}")
        return CompileReport(
            document_id=document.id,
            status=DocumentStatus.COMPILED,
            storage_key=document.artifact_key,
            url=url,
            cached=True,
        )

    def _fail(self, document: ResumeDocument, key: str, error: str, details: str) -> CompileReport:
        document.status = DocumentStatus.FAILED
        _log_error(f"{document.id}: {error}: {details}")
        return CompileReport(
            document_id=document.id,
            status=DocumentStatus.FAILED,
            storage_key=key,
            error=error,
            details=details,
        )

    def compile_document(self, document: ResumeDocument, force: bool = True) -> CompileReport:
        """
        Compile a document, store the PDF and return a signed URL.

        Args:
            document: Document to compile; its status and artifact_key are updated
            force: Recompile even if the document already has a stored artifact

        Returns:
            CompileReport; status FAILED only when storage fails

        Raises:
            ValueError: If the pipeline has no artifact store
        """
        store = self._require_store()
        if not force and document.artifact_key:
            report = self._resign(document)
            if report is not None:
                return report

        document.status = DocumentStatus.COMPILING
        name = f"resume_{document.id}"
        key = artifact_key(document.owner_id, document.id)

        outcome = self.compile_source(self.build_source(document), name)
        warnings = outcome.result.warnings if outcome.result else []

        if outcome.success:
            artifact = CompiledArtifact(data=outcome.pdf_bytes, storage_key=key)
        else:
            _log_warning(f"{document.id}: {outcome.error}, using plain-text fallback")
            _log_debug(f"Failure details:\n{outcome.details}")
            artifact = CompiledArtifact(
                data=encode_minimal_pdf(fallback_text(to_plaintext(document.sections))),
                storage_key=key,
                used_fallback=True,
            )

        try:
            store.upload(artifact.storage_key, artifact.data, artifact.content_type)
        except StorageError as e:
            return self._fail(document, key, UPLOAD_FAILED_ERROR, str(e))

        try:
            url = store.signed_url(key, self.config.store.signed_url_ttl_s)
        except StorageError as e:
            return self._fail(document, key, SIGNING_FAILED_ERROR, str(e))

        document.status = DocumentStatus.COMPILED
        document.artifact_key = key
        _log_success(
            f"{document.id}: stored {key} ({len(artifact.data)} bytes"
            f"{', fallback' if artifact.used_fallback else ''})"
        )
        return CompileReport(
            document_id=document.id,
            status=DocumentStatus.COMPILED,
            storage_key=key,
            url=url,
            used_fallback=artifact.used_fallback,
            details=outcome.details,
            warnings=list(warnings),
        )

    def delete_artifact(self, document: ResumeDocument) -> None:
        """
        Remove a document's stored PDF, e.g. when the document is deleted.

        Raises:
            StorageError: If the store cannot delete the object
        """
        key = document.artifact_key or artifact_key(document.owner_id, document.id)
        self._require_store().delete(key)
        document.artifact_key = None
        _log_info(f"{document.id}: removed artifact {key}")
