#!/usr/bin/env python3
"""
Demo script — run a document build locally without a database or Celery.

Builds the same in-memory instance twice against slugs/default so the
second run shows history rotation.  Uses the configured renderer
(RENDERER_BINARY, default pandoc); without it installed the builds
finish with exit code 127, which is still a recorded outcome.

Usage:
    cd backend
    python -m scripts.demo_build
"""

import asyncio
import uuid

from doccraft.pipeline.builder import DocumentBuilder
from doccraft.pipeline.context import AssetRef, BuildContext
from doccraft.pipeline.workspace import BuildWorkspace
from doccraft.storage.assets import LocalAssetStorage

DEMO_CODE = "DEMO0001"


def _context(builder: DocumentBuilder) -> BuildContext:
    return BuildContext(
        instance_uuid=str(uuid.uuid4()),
        instance_code=DEMO_CODE,
        workspace=BuildWorkspace.for_instance(DEMO_CODE, builder.uploads_dir),
        layout_slug="default",
        field_names=["title", "client", "amount"],
        serialized={"title": "Website redesign", "client": "ACME", "amount": 1200},
        raw="# Scope\n\nA new landing page.\n",
        assets=[AssetRef(name="logo", file="demo/logo.png")],
    )


def _print_outcome(run: int, outcome):
    """Pretty-print a BuildOutcome."""
    result = outcome.pipeline
    print(f"\n{'─' * 50}")
    print(f"  Build #{run}")
    print(f"  Execution ID : {result.execution_id[:12]}...")
    print(f"  Exit code    : {outcome.exit_code}")
    print(f"  Duration     : {result.total_duration_ms}ms")
    print(f"  Workspace    : {outcome.workspace.root}")

    print("\n  Step Results:")
    for sr in result.step_results:
        icon = "✓" if sr["status"] == "COMPLETED" else "✗" if sr["status"] == "FAILED" else "⊘"
        print(f"    {icon} {sr['step_name']} ({sr['duration_ms']}ms)")
        for k, v in sr.get("metadata", {}).items():
            print(f"        {k}: {v}")

    errors = result.context_summary.get("errors")
    if errors:
        print(f"\n    ⚠  Errors: {errors}")
    if not outcome.succeeded:
        print("\n  Renderer output (tail):")
        for line in outcome.output.strip().splitlines()[-5:]:
            print(f"    {line}")
    print(f"{'─' * 50}\n")


async def main():
    from doccraft.core.logging import setup_logging
    setup_logging("WARNING")     # quiet logs, show formatted output only

    builder = DocumentBuilder(storage=LocalAssetStorage())

    for run in (1, 2):
        outcome = await builder.run(_context(builder))
        await builder.drain()
        _print_outcome(run, outcome)

    history = BuildWorkspace.for_instance(DEMO_CODE, builder.uploads_dir).history_dir
    kept = sorted(p.name for p in history.iterdir()) if history.is_dir() else []
    print(f"History: {kept or 'empty (no successful render yet)'}")


if __name__ == "__main__":
    asyncio.run(main())
