from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parents[1] / "src"


def _run(*args: str) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "tfpublisher.cli", *args],
        capture_output=True,
        text=True,
        check=False,
        env=env,
    )


def test_cli_help() -> None:
    result = _run("--help")
    assert result.returncode == 0
    assert "run" in result.stdout and "inspect" in result.stdout


def test_cli_run_help() -> None:
    result = _run("run", "--help")
    assert result.returncode == 0
    assert "--config" in result.stdout
    assert "--count" in result.stdout


def test_cli_missing_command() -> None:
    assert _run().returncode != 0


def test_cli_wrong_argument_count() -> None:
    result = _run("run", "0", "0", "0", "map", "base_link", "100")
    assert result.returncode == 1
    assert "Usage:" in result.stdout
    assert "right number of arguments" in result.stderr


def test_cli_same_frames() -> None:
    result = _run("run", "0", "0", "0", "0", "0", "0", "map", "map", "100", "--count", "1")
    assert result.returncode == 1
    assert "the same" in result.stderr


def test_cli_run_euler() -> None:
    result = _run(
        "run", "1", "2", "3", "-1.5707963267948966", "0", "0", "map", "base_link", "5",
        "--count", "2",
    )
    assert result.returncode == 0, result.stderr
    out = json.loads(result.stdout)
    assert out["config"]["x"] == 1.0
    assert out["config"]["yaw"] == pytest.approx(-1.5707963, abs=1e-6)
    assert out["config"]["angle_units"] == "radians"


def test_cli_run_quaternion_verbose(tmp_path: Path) -> None:
    log_file = tmp_path / "log.jsonl"
    result = _run(
        "run", "0", "0", "1", "0", "0", "0", "1", "map", "base_link", "5",
        "--count", "2", "--verbose", "--log-file", str(log_file),
    )
    assert result.returncode == 0, result.stderr

    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    sent = [r for r in records if "transform" in r]
    assert len(sent) == 2
    assert sent[0]["transform"]["frame_id"] == "map"
    assert sent[0]["transform"]["translation"] == [0.0, 0.0, 1.0]


def test_cli_run_config_with_edits(tmp_path: Path) -> None:
    cfg = tmp_path / "sender.yaml"
    cfg.write_text(
        """
translation: [0.0, 0.0, 0.0]
frame_id: base_link
child_frame_id: camera
period_ms: 5
edits:
  - kind: translation
    x: 1.0
    y: 2.0
    z: 3.0
  - kind: quaternion
    qx: 1
    qy: 1
    qz: 0
    qw: 0
  - kind: units
    angle_units: degrees
"""
    )
    result = _run("run", "--config", str(cfg), "--count", "1")
    assert result.returncode == 0, result.stderr
    assert "non-normalized quaternion corrected" in result.stderr

    out = json.loads(result.stdout)
    assert (out["config"]["x"], out["config"]["y"], out["config"]["z"]) == (1.0, 2.0, 3.0)
    assert out["config"]["qx"] == pytest.approx(0.70710678)
    assert out["config"]["use_quaternion"] is False
    assert out["config"]["angle_units"] == "degrees"
    assert out["limits"] == {"min": -180.0, "max": 180.0}


def test_cli_inspect_degrees() -> None:
    result = _run(
        "inspect", "0", "0", "0", "1.5707963267948966", "0", "0", "map", "odom", "100",
        "--units", "degrees",
    )
    assert result.returncode == 0, result.stderr
    out = json.loads(result.stdout)
    assert out["frame_id"] == "map"
    assert out["period_ms"] == 100.0
    assert out["config"]["yaw"] == pytest.approx(90.0)
    assert out["limits"]["max"] == 180.0


def test_cli_missing_config(tmp_path: Path) -> None:
    result = _run("inspect", "--config", str(tmp_path / "nope.yaml"))
    assert result.returncode == 1
    assert "not found" in result.stderr
