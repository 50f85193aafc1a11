# src/acstep/visualization/dfa_exporter.py

import html
from typing import Any, Dict, Iterable, List, Optional

from acstep.automaton import ROOT, Automaton


def _symbol_label(symbol: str) -> str:
    if not symbol.isprintable() or symbol in ('"', "\\"):
        return f"0x{ord(symbol):02X}"
    return symbol


def export_automaton_to_dot(ac: Automaton,
                            include_fail_links: bool = True,
                            include_output_links: bool = False,
                            highlight: Optional[int] = None,
                            fail_path: Iterable[int] = ()) -> str:
    """
    Exports the automaton to GraphViz DOT format.

    Args:
        ac: The built Automaton.
        include_fail_links: Draw dashed failure edges. Edges back to root are
            left out, they add noise without information.
        include_output_links: Draw dotted output-link edges.
        highlight: State id to highlight as the current state of a step.
        fail_path: State ids visited through failure links during the step.

    Returns:
        A string containing the DOT graph definition.
    """
    visited_by_fail = set(fail_path)

    lines = [
        'digraph "AC_AUTOMATON" {',
        '  rankdir=LR;',
        '  node [shape=circle, fontname="Arial", fontsize=10];',
        '  edge [fontname="Arial", fontsize=9];',
        '  start [shape=point];',
    ]

    for state in ac.iter_bfs():
        attrs = []
        fill = None

        if state.is_terminal:
            pat_str = "\\n".join(ac.pattern(i) for i in state.ended_patterns)
            if len(pat_str) > 20:
                pat_str = pat_str[:18] + "..."
            attrs.append('shape=doublecircle')
            attrs.append('color=red')
            fill = '"#ffe6e6"'
            attrs.append(f'xlabel=<<FONT COLOR="darkred"><B>{html.escape(pat_str)}</B></FONT>>')

        if state.id == ROOT:
            fill = '"#e6ffe6"'
            attrs.append('xlabel="ROOT"')

        if state.id in visited_by_fail:
            fill = '"#fff3cd"'
        if highlight is not None and state.id == highlight:
            fill = '"#ffd54f"'
            attrs.append('penwidth=2')

        if fill:
            attrs.append('style=filled')
            attrs.append(f'fillcolor={fill}')

        attrs.append(f'label="{state.id}"')
        lines.append(f'  {state.id} [{", ".join(attrs)}];')

    lines.append(f'  start -> {ROOT};')

    for state in ac.iter_bfs():
        for symbol, child in sorted(state.transitions.items()):
            lines.append(f'  {state.id} -> {child} [label="{_symbol_label(symbol)}"];')

        if include_fail_links and state.id != ROOT and state.fail != ROOT:
            lines.append(f'  {state.id} -> {state.fail} [color="grey", style="dashed", constraint=false];')

        if include_output_links:
            for target in state.output_links:
                lines.append(f'  {state.id} -> {target} [color="darkred", style="dotted", constraint=false];')

    lines.append('}')
    return "\n".join(lines)


def export_automaton_to_json(ac: Automaton) -> Dict[str, Any]:
    """
    Export the automaton structure as JSON (nodes/edges lists).
    Useful for D3.js or other client-side renderers.
    """
    nodes: List[Dict[str, Any]] = []
    edges: List[Dict[str, Any]] = []

    for state in ac.iter_bfs():
        nodes.append({
            "id": state.id,
            "depth": state.depth,
            "accepting": state.is_terminal,
            "patterns": [ac.pattern(i) for i in state.ended_patterns],
            "fail": None if state.id == ROOT else state.fail,
            "output_links": list(state.output_links),
        })
        for symbol, child in sorted(state.transitions.items()):
            edges.append({
                "source": state.id,
                "target": child,
                "label": symbol,
            })

    return {"patterns": list(ac.patterns), "nodes": nodes, "edges": edges}
