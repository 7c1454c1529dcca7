#!/usr/bin/env python3
# flowgate/cli.py

import glob as _glob
import json
from pathlib import Path
from typing import Optional

import pandas as pd
import typer
import yaml

from flowgate.model.graph import WorkflowGraph, WorkflowInputError
from flowgate.options import ValidatorOptions
from flowgate.utils.graph import build_connection_graph, graph_summary
from flowgate.utils.io import load_workflow, write_json
from flowgate.utils.logger import get_logger, init_logger
from flowgate.validator import validate_workflow

app = typer.Typer(help="FlowGate CLI - validate n8n-style workflows before import")
logger = get_logger("cli")


@app.callback()
def main(
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also write logs to a rotating file in this directory"),
):
    init_logger(log_dir=log_dir)


def _options(strict_references: Optional[bool]) -> ValidatorOptions:
    opts = ValidatorOptions.from_env()
    if strict_references is None:
        return opts
    return ValidatorOptions(allow_name_references=not strict_references)


def _load(path: Path):
    try:
        return load_workflow(path)
    except (json.JSONDecodeError, yaml.YAMLError, ValueError) as e:
        raise typer.BadParameter(f"Cannot read workflow from {path}: {e}")


@app.command()
def verify(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True, help="Path to workflow JSON/YAML"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a JSON report to this path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show graph shape details"),
    strict_references: Optional[bool] = typer.Option(
        None, "--strict-references/--allow-name-references",
        help="Treat connections that reference nodes by name as errors (default: FLOWGATE_STRICT_REFERENCES)",
    ),
):
    """
    Validate one workflow. Exits with status 1 when the workflow has errors.
    """
    wf = _load(input)
    try:
        graph = WorkflowGraph.from_dict(wf)
    except WorkflowInputError as e:
        raise typer.BadParameter(f"{input}: {e}")

    result = validate_workflow(graph, options=_options(strict_references))
    summary = graph_summary(build_connection_graph(graph, graph.index))

    print(f"Valid:              {result.is_valid}")
    print(f"CompatibilityScore: {result.compatibility_score}")

    if result.findings:
        print("Detected issues:")
        for f in result.findings:
            print(f"- {f.severity}: {f}")
    if result.suggestions:
        print("Suggestions:")
        for s in result.suggestions:
            print(f"- {s}")

    if verbose:
        print("[debug] graph:", summary)

    if report is not None:
        payload = {"input": str(input), **result.to_dict(), "graph": summary}
        write_json(report, payload)
        print(f"[ok] wrote report to {report}")

    if not result.is_valid:
        raise typer.Exit(code=1)


@app.command()
def bench(
    glob: str = typer.Option("bench/validation/*/workflow.json", "--glob", help="Glob for workflow files"),
    out: Path = typer.Option(Path("experiments/results/validation.csv"), "--out", help="CSV path to write results"),
    strict_references: Optional[bool] = typer.Option(
        None, "--strict-references/--allow-name-references",
        help="Treat connections that reference nodes by name as errors",
    ),
):
    """
    Batch validate workflows and export a CSV summary.
    """
    opts = _options(strict_references)
    rows = []
    for fp_str in sorted(_glob.glob(glob)):
        fp = Path(fp_str)
        wf = _load(fp)

        if not isinstance(wf, dict) or "nodes" not in wf:
            logger.warning("%s does not look like a workflow (missing 'nodes'); skipping", fp)
            continue

        result = validate_workflow(wf, options=opts)
        rows.append({
            "id": fp.parent.name if fp.name == "workflow.json" else fp.stem,
            "isValid": result.is_valid,
            "compatibilityScore": result.compatibility_score,
            "errors": len(result.errors),
            "warnings": len(result.warnings),
            "suggestions": len(result.suggestions),
            "codes": " ".join(result.codes()),
        })
        logger.info("%s: valid=%s score=%d", fp, result.is_valid, result.compatibility_score)

    out.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows, columns=[
        "id", "isValid", "compatibilityScore", "errors", "warnings", "suggestions", "codes",
    ]).to_csv(out, index=False)
    print(f"[ok] wrote {out}")


if __name__ == "__main__":
    app()
