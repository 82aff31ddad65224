"""
External renderer invocation (pandoc + a LaTeX PDF engine).

The command line is fixed:

    pandoc <ws>/content.md --template=<ws>/template.tex
           --pdf-engine=<engine> -o <ws>/final.pdf

stdout and stderr are captured together.  The exit status is returned
exactly as the OS reports it; callers record it without remapping.
There is no retry.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from doccraft.core.config import settings
from doccraft.core.constants import RENDERER_NOT_FOUND_EXIT_CODE
from doccraft.core.logging import get_logger
from doccraft.pipeline.workspace import BuildWorkspace

logger = get_logger(__name__)


@dataclass(frozen=True)
class RenderOutcome:
    exit_code: int
    output: str
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class Renderer:
    """Runs the typesetting tool for one workspace."""

    def __init__(
        self,
        binary: str | None = None,
        pdf_engine: str | None = None,
        timeout: float | None = settings.RENDER_TIMEOUT_SECONDS,
    ) -> None:
        self.binary = binary or settings.RENDERER_BINARY
        self.pdf_engine = pdf_engine or settings.PDF_ENGINE
        # None: wait for the renderer indefinitely
        self.timeout = timeout

    def command(self, workspace: BuildWorkspace) -> list[str]:
        return [
            self.binary,
            str(workspace.source_path),
            f"--template={workspace.template_path}",
            f"--pdf-engine={self.pdf_engine}",
            "-o",
            str(workspace.artifact_path),
        ]

    async def render(self, workspace: BuildWorkspace) -> RenderOutcome:
        cmd = self.command(workspace)
        log = logger.bind(workspace=str(workspace.root), renderer=self.binary)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            # Binary missing or not executable: report it the way a shell would
            log.error("Renderer could not be started", error=str(exc))
            return RenderOutcome(exit_code=RENDERER_NOT_FOUND_EXIT_CODE, output=str(exc))

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            stdout, _ = await proc.communicate()
            log.error("Renderer timed out, killed", timeout_s=self.timeout, exit_code=proc.returncode)
            output = _decode(stdout) + f"\nrenderer killed after {self.timeout}s timeout\n"
            return RenderOutcome(exit_code=proc.returncode, output=output, timed_out=True)

        output = _decode(stdout)
        log.info("Renderer exited", exit_code=proc.returncode)
        return RenderOutcome(exit_code=proc.returncode, output=output)


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""
