"""
Integration tests for ResumePipeline: sections -> PDF -> artifact store.

The engine is either disabled (a compiler path that does not exist) or one of
the fake engines from conftest, so no TeX installation is needed.
"""

import sys

import pytest

from resumake.config import ResumakeConfig, StoreConfig
from resumake.contexts.publishing.artifact_store import LocalArtifactStore, StorageError
from resumake.contexts.publishing.pipeline import (
    MISSING_INPUT_ERROR,
    CompileOutcome,
    ResumePipeline,
    fallback_text,
)
from resumake.contexts.rendering.compiler import LatexCompiler
from resumake.contexts.templating.resume_data_structures import DocumentStatus, ResumeDocument
from resumake.utils.pdf_processing import extract_text, page_count

requires_posix_shell = pytest.mark.skipif(
    sys.platform == "win32", reason="fake engines are /bin/sh scripts"
)

JANE = {
    "id": "doc-1",
    "ownerId": "user-1",
    "sections": [
        {
            "id": "p",
            "type": "personal-info",
            "content": {"fullName": "Jane Doe", "email": "jane@example.com"},
        },
        {
            "id": "e",
            "type": "experience",
            "content": [{"company": "Acme", "role": "Engineer", "bullets": [{"text": "Built X"}]}],
        },
    ],
}


class BrokenStore:
    """Store whose every operation fails."""

    def __init__(self, fail_on="upload"):
        self.fail_on = fail_on
        self.uploads = []

    def upload(self, key, data, content_type):
        if self.fail_on == "upload":
            raise StorageError("bucket unavailable", key=key)
        self.uploads.append(key)

    def signed_url(self, key, ttl_seconds):
        raise StorageError("signing key revoked", key=key)

    def delete(self, key):
        raise StorageError("bucket unavailable", key=key)


@pytest.fixture
def store(tmp_path):
    return LocalArtifactStore(root=tmp_path / "artifacts", signing_secret="test-secret")


@pytest.fixture
def make_pipeline(compiler_config, store, tmp_path):
    def make(engine=None, store_override=None):
        config = ResumakeConfig(store=StoreConfig(root=str(store.root), signing_secret="test-secret"))
        config.compiler = compiler_config(engine or tmp_path / "disabled-engine")
        return ResumePipeline(
            config,
            store=store_override or store,
            compiler=LatexCompiler(config.compiler),
        )

    return make


@pytest.mark.integration
def test_disabled_engine_produces_fallback_pdf(make_pipeline, store):
    """With no working engine the stored PDF is the plain-text fallback."""
    pipeline = make_pipeline()
    document = ResumeDocument.from_dict(JANE)

    report = pipeline.compile_document(document)

    assert report.status is DocumentStatus.COMPILED
    assert report.used_fallback
    assert report.storage_key == "user-1/doc-1.pdf"
    assert store.verify_signed_url(report.url)

    pdf = store.read("user-1/doc-1.pdf")
    assert pdf.startswith(b"%PDF-1.4")
    assert page_count(pdf) == 1
    text = extract_text(pdf)
    assert "Resume - LaTeX Compilation Failed" in text
    assert "Jane Doe" in text
    assert "Built X" in text

    assert document.status is DocumentStatus.COMPILED
    assert document.artifact_key == "user-1/doc-1.pdf"


@pytest.mark.integration
def test_fallback_for_empty_document(make_pipeline, store):
    pipeline = make_pipeline()
    report = pipeline.compile_document(ResumeDocument(id="empty", owner_id="u"))

    assert report.used_fallback
    assert "Resume content unavailable" in extract_text(store.read("u/empty.pdf"))


@pytest.mark.unit
def test_fallback_text_header():
    assert fallback_text("Jane") == "Resume - LaTeX Compilation Failed\nPlain text version:\n\nJane"
    assert fallback_text("  ").endswith("Resume content unavailable")


@pytest.mark.integration
@requires_posix_shell
def test_successful_compile_is_stored(make_pipeline, fake_engine, store):
    pipeline = make_pipeline(engine=fake_engine("ok"))
    report = pipeline.compile_document(ResumeDocument.from_dict(JANE))

    assert report.status is DocumentStatus.COMPILED
    assert not report.used_fallback
    assert "Compiled by fake engine" in extract_text(store.read(report.storage_key))
    assert store.content_type(report.storage_key) == "application/pdf"


@pytest.mark.integration
@requires_posix_shell
def test_failed_compile_falls_back(make_pipeline, fake_engine, store):
    pipeline = make_pipeline(engine=fake_engine("failing"))
    report = pipeline.compile_document(ResumeDocument.from_dict(JANE))

    assert report.status is DocumentStatus.COMPILED
    assert report.used_fallback
    assert report.details.startswith("This is a fake TeX engine")


@pytest.mark.integration
def test_upload_failure_reports_failed(make_pipeline):
    pipeline = make_pipeline(store_override=BrokenStore("upload"))
    document = ResumeDocument.from_dict(JANE)

    report = pipeline.compile_document(document)

    assert report.status is DocumentStatus.FAILED
    assert report.error == "Failed to upload PDF"
    assert "bucket unavailable" in report.details
    assert document.status is DocumentStatus.FAILED
    assert document.artifact_key is None
    assert report.to_dict()["error"] == "Failed to upload PDF"


@pytest.mark.integration
def test_signing_failure_reports_failed(make_pipeline):
    broken = BrokenStore("sign")
    pipeline = make_pipeline(store_override=broken)

    report = pipeline.compile_document(ResumeDocument.from_dict(JANE))

    assert broken.uploads == ["user-1/doc-1.pdf"]
    assert report.status is DocumentStatus.FAILED
    assert report.error == "Failed to create signed URL"


@pytest.mark.integration
def test_reuse_stored_artifact(make_pipeline, store):
    pipeline = make_pipeline()
    document = ResumeDocument.from_dict(JANE)
    pipeline.compile_document(document)

    report = pipeline.compile_document(document, force=False)

    assert report.cached
    assert report.storage_key == "user-1/doc-1.pdf"
    assert store.verify_signed_url(report.url)


@pytest.mark.integration
def test_reuse_missing_artifact_recompiles(make_pipeline, store):
    pipeline = make_pipeline()
    document = ResumeDocument.from_dict({**JANE, "artifactKey": "user-1/gone.pdf"})

    report = pipeline.compile_document(document, force=False)

    assert not report.cached
    assert report.storage_key == "user-1/doc-1.pdf"


@pytest.mark.integration
def test_delete_artifact(make_pipeline, store):
    pipeline = make_pipeline()
    document = ResumeDocument.from_dict(JANE)
    pipeline.compile_document(document)

    pipeline.delete_artifact(document)

    assert not store.exists("user-1/doc-1.pdf")
    assert document.artifact_key is None


@pytest.mark.integration
def test_delete_artifact_propagates_storage_error(make_pipeline):
    pipeline = make_pipeline(store_override=BrokenStore())

    with pytest.raises(StorageError):
        pipeline.delete_artifact(ResumeDocument.from_dict(JANE))


@pytest.mark.unit
@pytest.mark.parametrize("source,name", [("", "resume_1"), ("\\documentclass{article}", ""), ("  ", "  ")])
def test_compile_source_requires_inputs(make_pipeline, source, name):
    outcome = make_pipeline().compile_source(source, name)

    assert not outcome.success
    assert outcome.to_response() == {"error": MISSING_INPUT_ERROR}


@pytest.mark.integration
def test_compile_source_failure_response(make_pipeline):
    outcome = make_pipeline().compile_source("\\documentclass{article}", "resume_1")
    response = outcome.to_response()

    assert response["error"] == "LaTeX compilation failed"
    assert "LaTeX compiler not found" in response["details"]


@pytest.mark.unit
def test_compile_outcome_success_response():
    assert CompileOutcome(pdf_bytes=b"%PDF-1.4").to_response() == b"%PDF-1.4"


@pytest.mark.unit
def test_build_source_populates_template(make_pipeline):
    source = make_pipeline().build_source(ResumeDocument.from_dict(JANE))

    assert r"\textbf{Jane Doe}" in source
    assert "jane@example.com" in source
    assert r"\item Built X" in source
    assert "{{" not in source
    assert "\n\n\n" not in source


SURROGATE_DOC = {
    "id": "d1",
    "ownerId": "user-1",
    "sections": [
        {"id": "p", "type": "personal-info", "content": {"fullName": "Jane \ud83d Doe"}},
    ],
}


@pytest.mark.integration
def test_lone_surrogate_still_yields_fallback_pdf(make_pipeline, store):
    """Text that cannot be encoded never stops a PDF from being stored."""
    report = make_pipeline().compile_document(ResumeDocument.from_dict(SURROGATE_DOC))

    assert report.status is DocumentStatus.COMPILED
    assert report.used_fallback
    assert "Jane ? Doe" in extract_text(store.read("user-1/d1.pdf"))


@pytest.mark.integration
@requires_posix_shell
def test_lone_surrogate_compiles_with_engine(make_pipeline, fake_engine, store):
    pipeline = make_pipeline(engine=fake_engine("ok"))

    report = pipeline.compile_document(ResumeDocument.from_dict(SURROGATE_DOC))

    assert report.status is DocumentStatus.COMPILED
    assert not report.used_fallback
    assert store.exists("user-1/d1.pdf")


@pytest.mark.unit
def test_pipeline_without_store_builds_but_does_not_publish(compiler_config, tmp_path):
    config = ResumakeConfig()
    config.compiler = compiler_config(tmp_path / "disabled-engine")
    pipeline = ResumePipeline(config)
    document = ResumeDocument.from_dict(JANE)

    assert r"\textbf{Jane Doe}" in pipeline.build_source(document)
    with pytest.raises(ValueError):
        pipeline.compile_document(document)
    with pytest.raises(ValueError):
        pipeline.delete_artifact(document)
    assert document.status is DocumentStatus.DRAFT
