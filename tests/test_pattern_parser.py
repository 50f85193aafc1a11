# tests/test_pattern_parser.py
import pytest
from acstep.automaton import InvalidPatternError
from acstep.patterns import load_patterns_file, parse_pattern_line, parse_patterns_text


def test_parse_plain_and_skipped_lines():
    assert parse_pattern_line("  hers  ") == "hers"
    assert parse_pattern_line("") is None
    assert parse_pattern_line("   ") is None
    assert parse_pattern_line("# comment") is None


def test_parse_quoted_pattern():
    assert parse_pattern_line('"  padded "') == "  padded "
    assert parse_pattern_line('"#hash"') == "#hash"
    assert parse_pattern_line(r'"tab\there"') == "tab\there"
    assert parse_pattern_line(r'"say \"hi\""') == 'say "hi"'


def test_empty_quoted_pattern_rejected():
    with pytest.raises(InvalidPatternError):
        parse_pattern_line('""')


def test_malformed_quoted_pattern_rejected():
    with pytest.raises(ValueError):
        parse_pattern_line('"open')
    with pytest.raises(ValueError):
        parse_pattern_line(r'"bad \q escape"')


def test_error_reports_line_number():
    with pytest.raises(InvalidPatternError) as exc:
        parse_patterns_text('he\n\n""\n')
    assert "line 3" in str(exc.value)
    assert exc.value.index == 3


def test_load_patterns_file(tmp_path):
    patterns_file = tmp_path / "demo.txt"
    patterns_file.write_text(
        "# classic\n"
        "he\n"
        "she\n"
        "\n"
        '"sea "\n',
        encoding="utf-8",
    )
    assert load_patterns_file(str(patterns_file)) == ["he", "she", "sea "]
