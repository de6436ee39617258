import pandas as pd
import pytest
import yaml

from anchorflow import AnchorFlowRun, InputMode
from anchorflow.core import RESOLVED_CONFIG_FILE, SUMMARY_FILE
from anchorflow.dispatch import DryRunExecutor, LocalExecutor
from anchorflow.exceptions import MissingFileError, ValidationError

from .conftest import StubRunner


def test_single_sample_end_to_end(write_file, tmp_path):
    out = tmp_path / "out"
    config_path = write_file(
        "run.conf",
        f"reference=ref.bed\ndb=db.txt\nanchor=a.bed\noutDirectory={out}\n",
    )
    executor = DryRunExecutor()
    report = AnchorFlowRun(config_path, executor=executor, analysis_cmd="analyse").run()

    assert report.mode is InputMode.SINGLE_SAMPLE
    assert len(report.results) == 1
    assert report.results[0].out_dir == out
    assert report.results[0].ordinal is None
    assert executor.commands == [["analyse", str(config_path)]]
    assert report.merge_result is None
    assert report.success


def test_reference_list_run_with_tracks(write_file, tmp_path):
    out = tmp_path / "out"
    refs = write_file("refs.tsv", "r1.bed\tA\nr2.bed\tB\n")
    config_path = write_file(
        "run.conf",
        "module load bedtools\n"
        f"anchor=a.bed\noutDirectory={out}\ndb=db.txt\nreferences={refs}\ntracks=y\n",
    )
    runner = StubRunner()
    executor = LocalExecutor(max_workers=2, runner=runner)
    report = AnchorFlowRun(
        config_path, executor=executor, analysis_cmd="analyse", merge_cmd="merge"
    ).run()

    assert report.mode is InputMode.REFERENCE_LIST
    assert report.success
    assert report.merge_result.success
    assert all(cmd[:2] == ["bash", "-lc"] for cmd in runner.commands)
    assert "module load bedtools && exec merge" in runner.commands[-1][2]

    summary = pd.read_csv(out / SUMMARY_FILE, sep="\t")
    assert list(summary["sample"]) == ["A", "B"]
    assert list(summary["track"]) == [1, 2]
    assert list(summary["out_dir"]) == [str(out / "A"), str(out / "B")]

    snapshot = yaml.safe_load((out / RESOLVED_CONFIG_FILE).read_text())
    assert snapshot["modules"] == ["bedtools"]
    assert snapshot["options"]["references"] == str(refs)


def test_failed_samples_are_counted(write_file, tmp_path):
    out = tmp_path / "out"
    matrices = write_file("m.txt", "m1.txt A\nm2.txt\nm3.txt C\n")
    config_path = write_file("run.conf", f"anchor=a.bed\noutDirectory={out}\nmatrices={matrices}\n")
    runner = StubRunner(returncodes={"C": 1})
    report = AnchorFlowRun(
        config_path, executor=LocalExecutor(max_workers=1, runner=runner), analysis_cmd="analyse"
    ).run()

    assert [r.status for r in report.results] == ["completed", "malformed", "failed"]
    assert report.n_failed == 2
    assert not report.success
    assert len(runner.calls) == 2


def test_describe_lists_invocations(write_file, tmp_path):
    matrices = write_file("m.txt", "m1.txt A\n")
    config_path = write_file("run.conf", f"anchor=a.bed\noutDirectory=/out\nmatrices={matrices}\n")
    description = AnchorFlowRun(config_path, executor=DryRunExecutor()).describe()

    assert description["mode"] == "MATRIX_LIST"
    assert description["samples"][0]["out_dir"] == "/out/A"
    assert description["samples"][0]["arguments"][-2:] == ["-numSamples", "1"]


def test_validation_errors_propagate(write_file):
    config_path = write_file("run.conf", "anchor=a.bed\nmatrix=m.txt\n")
    with pytest.raises(ValidationError, match="missing anchor or outDirectory"):
        AnchorFlowRun(config_path, executor=DryRunExecutor()).run()


def test_missing_sample_list_is_fatal(write_file, tmp_path):
    config_path = write_file(
        "run.conf", f"anchor=a.bed\noutDirectory=/out\nmatrices={tmp_path / 'nope.txt'}\n"
    )
    with pytest.raises(MissingFileError):
        AnchorFlowRun(config_path, executor=DryRunExecutor()).prepare()


def test_out_directory_that_cannot_be_created(write_file, tmp_path):
    blocker = write_file("blocker", "not a directory\n")
    config_path = write_file(
        "run.conf", f"matrix=m.txt\nanchor=a.bed\noutDirectory={blocker / 'out'}\n"
    )
    runner = StubRunner()
    run = AnchorFlowRun(
        config_path, executor=LocalExecutor(runner=runner), analysis_cmd="analyse"
    )
    with pytest.raises(ValidationError, match="Cannot use outDirectory"):
        run.run()
    assert runner.calls == []
