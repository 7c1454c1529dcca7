import json
from pathlib import Path

import pytest

from flowgate.validator import validate_workflow

BENCH_DIR = Path(__file__).resolve().parent.parent / "bench" / "validation"


@pytest.mark.parametrize("case_dir", sorted(BENCH_DIR.glob("V*")), ids=lambda p: p.name)
def test_validation_bench(case_dir: Path):
    """
    Validation benchmark:
    - load workflow.json and expect.json
    - run validate_workflow
    - compare validity, score and the exact finding codes (in report order)
    """
    wf_file = case_dir / "workflow.json"
    exp_file = case_dir / "expect.json"

    assert wf_file.exists(), f"Missing workflow.json in {case_dir}"
    assert exp_file.exists(), f"Missing expect.json in {case_dir}"

    with wf_file.open("r", encoding="utf-8") as f:
        workflow = json.load(f)
    with exp_file.open("r", encoding="utf-8") as f:
        expect = json.load(f)

    report = validate_workflow(workflow)
    asserts = expect.get("assert") or {}

    if "is_valid" in asserts:
        assert report.is_valid == asserts["is_valid"], f"{case_dir.name}: {[str(e) for e in report.errors]}"

    if "score" in asserts:
        assert report.compatibility_score == asserts["score"], (
            f"{case_dir.name}: score={report.compatibility_score}, expected={asserts['score']}"
        )

    if "error_codes" in asserts:
        got = [f.code for f in report.errors]
        assert got == asserts["error_codes"], f"{case_dir.name}: errors={got}"

    if "warning_codes" in asserts:
        got = [f.code for f in report.warnings]
        assert got == asserts["warning_codes"], f"{case_dir.name}: warnings={got}"

    if "suggestion_contains" in asserts:
        needle = asserts["suggestion_contains"]
        matching = [s for s in report.suggestions if needle in s]
        assert len(matching) == 1, f"{case_dir.name}: suggestions={report.suggestions}"

    assert 0 <= report.compatibility_score <= 100
