"""Renderer invocation."""

import stat

import pytest

from doccraft.pipeline.renderer import Renderer
from doccraft.pipeline.workspace import BuildWorkspace


@pytest.fixture
def workspace(tmp_path):
    ws = BuildWorkspace.for_instance("OFF0007", tmp_path / "uploads")
    ws.root.mkdir(parents=True)
    return ws


def _script(path, body):
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


def test_command_line(workspace):
    renderer = Renderer(binary="pandoc", pdf_engine="xelatex")
    root = workspace.root

    assert renderer.command(workspace) == [
        "pandoc",
        f"{root}/content.md",
        f"--template={root}/template.tex",
        "--pdf-engine=xelatex",
        "-o",
        f"{root}/final.pdf",
    ]


@pytest.mark.asyncio
async def test_exit_code_and_combined_output(tmp_path, workspace):
    binary = _script(tmp_path / "r", 'echo "to stdout"\necho "to stderr" >&2\nexit 5\n')

    outcome = await Renderer(binary=str(binary)).render(workspace)

    assert outcome.exit_code == 5
    assert not outcome.succeeded
    assert "to stdout" in outcome.output
    assert "to stderr" in outcome.output
    assert not outcome.timed_out


@pytest.mark.asyncio
async def test_missing_binary_reports_127(tmp_path, workspace):
    outcome = await Renderer(binary=str(tmp_path / "absent")).render(workspace)

    assert outcome.exit_code == 127
    assert "absent" in outcome.output


@pytest.mark.asyncio
async def test_timeout_kills_renderer(tmp_path, workspace):
    binary = _script(tmp_path / "slow", "exec sleep 30\n")

    outcome = await Renderer(binary=str(binary), timeout=0.2).render(workspace)

    assert outcome.timed_out
    assert outcome.exit_code == -9
    assert "timeout" in outcome.output
