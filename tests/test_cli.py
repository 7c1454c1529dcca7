import json
from pathlib import Path

import pandas as pd
from typer.testing import CliRunner

from flowgate.cli import app

BENCH_DIR = Path(__file__).resolve().parent.parent / "bench" / "validation"
runner = CliRunner()


def test_verify_valid_workflow_writes_report(tmp_path):
    report = tmp_path / "out" / "report.json"
    result = runner.invoke(app, [
        "verify", "--input", str(BENCH_DIR / "V01_single_node" / "workflow.json"),
        "--report", str(report), "--verbose",
    ])
    assert result.exit_code == 0, result.output
    assert "CompatibilityScore: 95" in result.output
    assert "ISOLATED_NODE" in result.output

    payload = json.loads(report.read_text(encoding="utf-8"))
    assert payload["isValid"] is True
    assert payload["compatibilityScore"] == 95
    assert payload["graph"]["isolated"] == ["trigger"]


def test_verify_invalid_workflow_exits_1():
    result = runner.invoke(app, ["verify", "-i", str(BENCH_DIR / "V03_dangling_target" / "workflow.json")])
    assert result.exit_code == 1
    assert "INVALID_TARGET_NODE" in result.output


def test_verify_strict_references():
    wf = str(BENCH_DIR / "V04_name_reference" / "workflow.json")
    assert runner.invoke(app, ["verify", "-i", wf]).exit_code == 0
    assert runner.invoke(app, ["verify", "-i", wf, "--strict-references"]).exit_code == 1


def test_verify_reads_yaml(tmp_path):
    wf = tmp_path / "wf.yaml"
    wf.write_text(
        "id: wf-yaml\n"
        "name: From YAML\n"
        "nodes:\n"
        "  - {id: a, name: A, type: n8n-nodes-base.manualTrigger, typeVersion: 1, position: [0, 0], parameters: {}}\n"
        "connections: {}\n",
        encoding="utf-8",
    )
    result = runner.invoke(app, ["verify", "-i", str(wf)])
    assert result.exit_code == 0, result.output


def test_verify_rejects_unreadable_input(tmp_path):
    bad = tmp_path / "broken.json"
    bad.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, ["verify", "-i", str(bad)])
    assert result.exit_code == 2

    not_object = tmp_path / "list.json"
    not_object.write_text("[1, 2]", encoding="utf-8")
    assert runner.invoke(app, ["verify", "-i", str(not_object)]).exit_code == 2


def test_bench_writes_csv(tmp_path):
    out = tmp_path / "results.csv"
    result = runner.invoke(app, ["bench", "--glob", str(BENCH_DIR / "*" / "workflow.json"), "--out", str(out)])
    assert result.exit_code == 0, result.output

    df = pd.read_csv(out)
    assert len(df) == len(list(BENCH_DIR.glob("V*")))
    row = df.set_index("id").loc["V01_single_node"]
    assert row["compatibilityScore"] == 95
    assert bool(row["isValid"]) is True
