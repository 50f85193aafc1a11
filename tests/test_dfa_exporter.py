# tests/test_dfa_exporter.py
import shutil

import pytest
from acstep.automaton import build_automaton
from acstep.visualization.dfa_exporter import export_automaton_to_dot, export_automaton_to_json
from acstep.visualization.graphviz_renderer import error_svg, frame_title, render_automaton_svg


@pytest.fixture
def classic():
    return build_automaton(["he", "she", "his", "hers"])


def test_dot_contains_states_and_edges(classic):
    dot = export_automaton_to_dot(classic)
    assert dot.startswith('digraph "AC_AUTOMATON" {')
    assert dot.rstrip().endswith("}")
    assert '0 -> 1 [label="h"];' in dot
    assert "shape=doublecircle" in dot
    # she -> he failure edge is drawn, failures to root are not
    assert '5 -> 2 [color="grey", style="dashed", constraint=false];' in dot
    assert '8 -> 0 [color="grey"' not in dot


def test_dot_optional_links_and_highlight(classic):
    dot = export_automaton_to_dot(classic, include_fail_links=False,
                                  include_output_links=True, highlight=8, fail_path=[2])
    assert 'style="dashed"' not in dot
    assert '5 -> 2 [color="darkred", style="dotted", constraint=false];' in dot
    line = next(l for l in dot.splitlines() if l.strip().startswith("8 ["))
    assert "penwidth=2" in line and '"#ffd54f"' in line
    line = next(l for l in dot.splitlines() if l.strip().startswith("2 ["))
    assert '"#fff3cd"' in line


def test_dot_escapes_non_printable_symbols():
    dot = export_automaton_to_dot(build_automaton(["a\nb", 'q"']))
    assert 'label="0x0A"' in dot
    assert 'label="0x22"' in dot


def test_json_export(classic):
    data = export_automaton_to_json(classic)
    assert data["patterns"] == ["he", "she", "his", "hers"]
    assert len(data["nodes"]) == 10
    assert len(data["edges"]) == 9
    by_id = {n["id"]: n for n in data["nodes"]}
    assert by_id[0]["fail"] is None
    assert by_id[5]["patterns"] == ["she"]
    assert by_id[5]["output_links"] == [2]
    assert by_id[9]["fail"] == 3


def test_render_without_graphviz(monkeypatch, classic):
    monkeypatch.setattr(shutil, "which", lambda name: None)
    svg = render_automaton_svg(classic, highlight=5)
    assert svg.startswith("<svg")
    assert "not found" in svg
    assert "4 patterns, 10 states, at state 5" in svg


def test_error_svg_escapes_markup():
    svg = error_svg("bad <script>alert(1)</script>", title="<b>x</b>")
    assert "<script>" not in svg
    assert "&lt;script&gt;" in svg
    assert "&lt;b&gt;x&lt;/b&gt;" in svg


def test_frame_title(classic):
    assert frame_title(classic) == "4 patterns, 10 states"
    assert frame_title(classic, 0) == "4 patterns, 10 states, at state 0"


@pytest.mark.skipif(shutil.which("dot") is None, reason="GraphViz not installed")
def test_render_with_graphviz(classic):
    svg = render_automaton_svg(classic, highlight=8, fail_path=[2])
    assert "<svg" in svg
