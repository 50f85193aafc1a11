# tests/integration/test_full_pipeline.py

import json

import pytest

from acstep.main import main, run_matcher


def test_full_pipeline(tmp_path, capsys):
    patterns_file = tmp_path / "patterns.txt"
    patterns_file.write_text("# demo\nhe\nshe\nhis\nhers\n", encoding="utf-8")

    rc = main(["--patterns", str(patterns_file), "--text", "she sells seashells", "--verify"])
    out = capsys.readouterr().out

    assert rc == 0
    assert "[MATCH] 'she' | start=0 end=2" in out
    assert "[MATCH] 'he' | start=1 end=2" in out
    assert "[+] 4 matches." in out


def test_text_file_ignore_case_verbose(tmp_path, capsys):
    text_file = tmp_path / "text.txt"
    text_file.write_bytes("USHERS".encode("utf-8"))

    rc = main(["-p", "He", "-p", "hers", "--text-file", str(text_file),
               "--ignore-case", "--verbose", "--step"])
    doc = json.loads(capsys.readouterr().out)

    assert rc == 0
    assert doc["patterns"] == ["he", "hers"]
    assert [(m["pattern"], m["start"]) for m in doc["matches"]] == [("he", 2), ("hers", 2)]
    assert len(doc["steps"]) == 6


def test_step_trace(capsys):
    matches = run_matcher(["aa"], "aaa", step=True)
    out = capsys.readouterr().out
    assert len(matches) == 2
    assert out.count("[STEP]") == 3
    assert "via fail [1]" in out


def test_dot_output(capsys):
    assert main(["-p", "he", "-p", "she", "--text", "x", "--dot"]) == 0
    assert capsys.readouterr().out.startswith('digraph "AC_AUTOMATON"')


def test_invalid_pattern_file(tmp_path, capsys):
    patterns_file = tmp_path / "bad.txt"
    patterns_file.write_text('ok\n""\n', encoding="utf-8")

    rc = main(["--patterns", str(patterns_file), "--text", "ok"])
    assert rc == 2
    assert "line 2" in capsys.readouterr().err


def test_missing_pattern_file(tmp_path, capsys):
    rc = main(["--patterns", str(tmp_path / "nope.txt"), "--text", "x"])
    assert rc == 2
    assert capsys.readouterr().err.startswith("[-]")


def test_dot_rejects_trace_flags(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["-p", "he", "--text", "he", "--dot", "--verify"])
    assert exc.value.code == 2
    assert "--dot cannot be combined" in capsys.readouterr().err

    with pytest.raises(ValueError):
        run_matcher(["he"], "he", dot=True, step=True)
