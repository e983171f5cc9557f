"""
LaTeX Compilation Module

Compiles LaTeX source to PDF bytes with an external engine (pdflatex by default).

Each request runs in its own workspace: the source is written there, the engine
runs a fixed number of passes (two, so cross-references resolve), and the PDF is
read back into memory. The workspace is then handed to the janitor for deferred
deletion, on every exit path.

Failures are returned as CompilationResult(success=False) with a bounded excerpt of
the engine log in `details`; they are never raised.
"""

import os
import re
import signal
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from resumake.config import CompilerConfig
from resumake.contexts.rendering.logger import (
    _log_debug,
    _log_warning,
    log_compilation_result,
    log_compilation_start,
)
from resumake.contexts.rendering.workspace import WorkspaceJanitor, create_workspace
from resumake.utils.pdf_processing import page_count
from resumake.utils.text_processing import sanitize_file_name, truncate


@dataclass
class CompilationRequest:
    """
    One compile call.

    Attributes:
        source: Complete LaTeX document
        workspace_name: Caller-supplied base name for the workspace and output files
    """

    source: str
    workspace_name: str


@dataclass
class CompilationResult:
    """
    Result of LaTeX compilation.

    Attributes:
        success: Whether a PDF was produced by every pass
        pdf_bytes: Contents of the generated PDF (None if failed)
        details: Bounded failure detail (log excerpt or reason); "" on success
        errors: Parsed LaTeX errors
        warnings: Parsed LaTeX warnings
        stdout: Engine standard output, all passes
        stderr: Engine standard error, all passes
        page_count: Number of pages in the generated PDF (None if not available)
        workspace: Workspace used for this compilation (already scheduled for removal)
        elapsed_s: Wall-clock time spent compiling
    """

    success: bool
    pdf_bytes: Optional[bytes] = None
    details: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stdout: str = ""
    stderr: str = ""
    page_count: Optional[int] = None
    workspace: Optional[Path] = None
    elapsed_s: float = 0.0


class EngineFailure(Exception):
    """A pass did not complete: non-zero exit, timeout or missing executable."""

    def __init__(self, reason: str, stdout: str = "", stderr: str = ""):
        self.reason = reason
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(reason)


def _parse_latex_log(log_content: str) -> Tuple[List[str], List[str]]:
    """
    Parse LaTeX log file for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    # LaTeX error pattern: "! Error message"
    error_pattern = re.compile(r"^! (.+)$", re.MULTILINE)
    for match in error_pattern.finditer(log_content):
        errors.append(match.group(1).strip())

    # -file-line-error style: "./resume.tex:12: Undefined control sequence."
    file_line_pattern = re.compile(r"^\S+\.tex:\d+: (.+)$", re.MULTILINE)
    for match in file_line_pattern.finditer(log_content):
        message = match.group(1).strip()
        if message not in errors:
            errors.append(message)

    for pattern in [r"Emergency stop", r"File ended while scanning use of"]:
        match = re.search(rf"({pattern}.*?)$", log_content, re.MULTILINE)
        if match and match.group(1) not in errors:
            errors.append(match.group(1))

    warning_patterns = [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ]
    for pattern in warning_patterns:
        for match in re.finditer(pattern, log_content, re.MULTILINE):
            warnings.append(match.group(1).strip())

    return errors, warnings


def _kill_process_group(process: subprocess.Popen) -> None:
    """Forcibly stop the engine and anything it spawned."""
    if hasattr(os, "killpg"):
        try:
            os.killpg(process.pid, signal.SIGKILL)
            return
        except (ProcessLookupError, PermissionError):
            pass
    process.kill()


class LatexCompiler:
    """
    Runs the typesetting engine against one source per call.

    Safe to share between threads: the only shared state is the work root, which is
    partitioned into unique workspaces, and the janitor, which is locked.
    """

    def __init__(
        self,
        config: Optional[CompilerConfig] = None,
        janitor: Optional[WorkspaceJanitor] = None,
    ):
        self.config = config or CompilerConfig()
        self.janitor = janitor or WorkspaceJanitor(delay_s=self.config.cleanup_delay_s)

    def build_command(self, tex_file: Path) -> List[str]:
        return [
            self.config.compiler,
            "-interaction=nonstopmode",
            "-halt-on-error",
            "-file-line-error",
            f"-output-directory={tex_file.parent}",
            tex_file.name,
        ]

    def _run_pass(self, command: List[str], cwd: Path, pass_number: int) -> Tuple[str, str]:
        """
        Run one engine pass to completion or timeout.

        Raises:
            EngineFailure: On non-zero exit, timeout or missing executable
        """
        try:
            process = subprocess.Popen(
                command,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
                start_new_session=True,
            )
        except FileNotFoundError:
            raise EngineFailure(f"LaTeX compiler not found: {self.config.compiler}")
        except PermissionError as e:
            raise EngineFailure(f"LaTeX compiler not executable: {e}")

        with process:
            try:
                stdout, stderr = process.communicate(timeout=self.config.timeout_s)
            except subprocess.TimeoutExpired:
                _kill_process_group(process)
                stdout, stderr = process.communicate()
                raise EngineFailure(
                    f"Compilation timed out after {self.config.timeout_s}s on pass {pass_number}",
                    stdout=stdout or "",
                    stderr=stderr or "",
                )

        if process.returncode != 0:
            raise EngineFailure(
                f"LaTeX compilation failed on pass {pass_number} (exit code {process.returncode})",
                stdout=stdout or "",
                stderr=stderr or "",
            )
        return stdout or "", stderr or ""

    def _failure_details(self, log_file: Path, reason: str, output: str) -> str:
        """
        Bounded failure detail: the start of the engine log if there is one,
        otherwise the reason followed by the start of the engine output.
        """
        limit = self.config.log_excerpt_chars
        try:
            log_content = log_file.read_text(encoding="latin-1")
        except OSError:
            log_content = ""

        if log_content.strip():
            return truncate(log_content, limit)
        if output.strip():
            return truncate(f"{reason}\n{output}", limit)
        return truncate(reason, limit)

    def _compile_in(self, workspace: Path, request: CompilationRequest) -> CompilationResult:
        stem = sanitize_file_name(request.workspace_name)
        tex_file = workspace / f"{stem}.tex"
        log_file = workspace / f"{stem}.log"
        pdf_file = workspace / f"{stem}.pdf"

        try:
            # Lone surrogates from truncated client text become "?"
            tex_file.write_text(request.source, encoding="utf-8", errors="replace")
        except (OSError, UnicodeError) as e:
            reason = f"Could not write LaTeX source: {e}"
            return CompilationResult(
                success=False, details=truncate(reason, self.config.log_excerpt_chars), errors=[reason]
            )

        command = self.build_command(tex_file)
        all_stdout: List[str] = []
        all_stderr: List[str] = []

        # Two passes: the first writes .aux, the second resolves references from it
        for pass_number in range(1, self.config.num_passes + 1):
            _log_debug(f"Pass {pass_number}/{self.config.num_passes}: {' '.join(command)}")
            try:
                stdout, stderr = self._run_pass(command, workspace, pass_number)
            except EngineFailure as failure:
                all_stdout.append(failure.stdout)
                all_stderr.append(failure.stderr)
                combined_stdout = "\n".join(all_stdout)
                errors, warnings = [], []
                if log_file.exists():
                    errors, warnings = _parse_latex_log(log_file.read_text(encoding="latin-1"))
                return CompilationResult(
                    success=False,
                    details=self._failure_details(log_file, failure.reason, combined_stdout),
                    errors=errors or [failure.reason],
                    warnings=warnings,
                    stdout=combined_stdout,
                    stderr="\n".join(all_stderr),
                )
            all_stdout.append(stdout)
            all_stderr.append(stderr)

        combined_stdout = "\n".join(all_stdout)
        errors, warnings = [], []
        if log_file.exists():
            errors, warnings = _parse_latex_log(log_file.read_text(encoding="latin-1"))

        if not pdf_file.exists():
            reason = "PDF file was not generated"
            return CompilationResult(
                success=False,
                details=self._failure_details(log_file, reason, combined_stdout),
                errors=errors or [reason],
                warnings=warnings,
                stdout=combined_stdout,
                stderr="\n".join(all_stderr),
            )

        pdf_bytes = pdf_file.read_bytes()
        return CompilationResult(
            success=True,
            pdf_bytes=pdf_bytes,
            errors=errors,
            warnings=warnings,
            stdout=combined_stdout,
            stderr="\n".join(all_stderr),
            page_count=page_count(pdf_bytes),
        )

    def compile(self, request: CompilationRequest, verbose: bool = False) -> CompilationResult:
        """
        Compile LaTeX source to PDF bytes.

        Args:
            request: Source and workspace base name
            verbose: Log full diagnostics even on success

        Returns:
            CompilationResult; success=False describes a Compilation Failure
        """
        start_time = time.time()
        workspace = None
        try:
            try:
                workspace = create_workspace(Path(self.config.work_root), request.workspace_name)
            except OSError as e:
                reason = f"Could not create workspace: {e}"
                _log_warning(reason)
                result = CompilationResult(
                    success=False,
                    details=truncate(reason, self.config.log_excerpt_chars),
                    errors=[reason],
                )
            else:
                log_compilation_start(request.workspace_name, workspace, self.config.num_passes)
                result = self._compile_in(workspace, request)
        finally:
            if workspace is not None:
                self.janitor.schedule(workspace)

        result.workspace = workspace
        result.elapsed_s = time.time() - start_time
        log_compilation_result(request.workspace_name, result, verbose=verbose)
        return result
