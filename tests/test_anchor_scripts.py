"""Tests for the evidence_validator and anchor_resolver scripts."""
from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

DOC = "Greet the user warmly.\n\nAsk for their name."


def _run(script: str, args: list[str]) -> subprocess.CompletedProcess[str]:
    root = Path(__file__).resolve().parents[1]
    env = os.environ.copy()
    env["PYTHONPATH"] = str(root / "src")
    return subprocess.run(
        [sys.executable, str(root / "scripts" / script), *args],
        cwd=str(root),
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )


def _write_doc(tmp_path: Path) -> Path:
    path = tmp_path / "prompt.txt"
    path.write_text(DOC)
    return path


class TestEvidenceValidator:
    def test_partitions_evidence(self, tmp_path: Path) -> None:
        doc = _write_doc(tmp_path)
        evidence = tmp_path / "evidence.json"
        evidence.write_text(json.dumps([
            {"id": "e1", "originalText": "Greet the user warmly."},
            {"id": "e2", "original_text": "Always answer in French."},
        ]))
        proc = _run("evidence_validator.py", ["--doc", str(doc), "--evidence", str(evidence)])
        assert proc.returncode == 0, proc.stderr
        payload = json.loads(proc.stdout)
        assert payload["accepted"] == ["e1"]
        assert payload["rejected"][0]["id"] == "e2"
        assert payload["rejected"][0]["reason"] == "not found"
        assert payload["threshold"] == 0.9

    def test_policy_file(self, tmp_path: Path) -> None:
        doc = _write_doc(tmp_path)
        evidence = tmp_path / "evidence.jsonl"
        evidence.write_text('{"id": "n1", "original_text": "Greet  the user   warmly."}\n')
        policy = tmp_path / "match_policy.json"
        policy.write_text(json.dumps({"validation_threshold": 0.97}))
        proc = _run(
            "evidence_validator.py",
            ["--doc", str(doc), "--evidence", str(evidence), "--policy", str(policy)],
        )
        assert proc.returncode == 0, proc.stderr
        payload = json.loads(proc.stdout)
        assert payload["rejected"][0]["reason"] == "low confidence match (95%)"

    def test_policy_confidence_reaches_validation(self, tmp_path: Path) -> None:
        doc = _write_doc(tmp_path)
        evidence = tmp_path / "evidence.jsonl"
        evidence.write_text('{"id": "n1", "original_text": "Greet  the user   warmly."}\n')
        policy = tmp_path / "match_policy.json"
        policy.write_text(json.dumps({"normalized_confidence": 0.5}))
        proc = _run(
            "evidence_validator.py",
            ["--doc", str(doc), "--evidence", str(evidence), "--policy", str(policy)],
        )
        assert proc.returncode == 0, proc.stderr
        payload = json.loads(proc.stdout)
        assert payload["accepted"] == []
        assert payload["rejected"][0]["reason"] == "low confidence match (50%)"

    def test_output_file(self, tmp_path: Path) -> None:
        doc = _write_doc(tmp_path)
        evidence = tmp_path / "evidence.json"
        evidence.write_text(json.dumps([{"id": "e1", "originalText": "Ask for their name."}]))
        out = tmp_path / "reports" / "report.json"
        proc = _run(
            "evidence_validator.py",
            ["--doc", str(doc), "--evidence", str(evidence), "--output", str(out)],
        )
        assert proc.returncode == 0, proc.stderr
        assert json.loads(out.read_text()) == json.loads(proc.stdout)
        assert json.loads(out.read_text())["accepted"] == ["e1"]

    def test_record_without_id(self, tmp_path: Path) -> None:
        doc = _write_doc(tmp_path)
        evidence = tmp_path / "evidence.json"
        evidence.write_text(json.dumps([{"originalText": "Ask for their name."}]))
        proc = _run("evidence_validator.py", ["--doc", str(doc), "--evidence", str(evidence)])
        assert proc.returncode == 1
        assert "no id" in proc.stderr

    def test_missing_file(self, tmp_path: Path) -> None:
        proc = _run(
            "evidence_validator.py",
            ["--doc", str(tmp_path / "nope.txt"), "--evidence", str(tmp_path / "e.json")],
        )
        assert proc.returncode == 1
        assert "not found" in proc.stderr


class TestAnchorResolver:
    def test_query(self, tmp_path: Path) -> None:
        doc = _write_doc(tmp_path)
        proc = _run("anchor_resolver.py", ["--doc", str(doc), "--query", "warmly. Ask for"])
        assert proc.returncode == 0, proc.stderr
        payload = json.loads(proc.stdout)
        assert payload["strategy"] == "normalized"
        assert payload["char_start"] == 15

    def test_location(self, tmp_path: Path) -> None:
        doc = _write_doc(tmp_path)
        proc = _run(
            "anchor_resolver.py",
            ["--doc", str(doc), "--location", 'después de "Ask for their name."'],
        )
        payload = json.loads(proc.stdout)
        assert payload["insertion_index"] == len(DOC)
        assert payload["direction"] == "after"

    def test_location_with_sections(self, tmp_path: Path) -> None:
        doc = _write_doc(tmp_path)
        sections = tmp_path / "sections.json"
        sections.write_text(json.dumps([
            {"id": "s1", "title": "Greeting", "tagName": "greeting",
             "startIndex": 0, "endIndex": 22, "content": "Greet the user warmly."},
        ]))
        proc = _run(
            "anchor_resolver.py",
            ["--doc", str(doc), "--location", "nowhere at all", "--hint", "Greeting",
             "--sections", str(sections)],
        )
        payload = json.loads(proc.stdout)
        assert payload["found"] is True
        assert payload["insertion_index"] == 22
        assert payload["confidence"] == 0.6
