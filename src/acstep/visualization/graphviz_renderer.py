# src/acstep/visualization/graphviz_renderer.py

"""
SVG rendering of automaton frames through the GraphViz 'dot' executable.

A frame is the automaton graph with the current state and the failure path
of one step highlighted. Rendering never raises: when GraphViz is missing or
fails, an error SVG naming the frame is returned in place of the graph.
"""

import html
import logging
import shutil
import subprocess
from typing import Iterable, Optional

from acstep.automaton import Automaton
from acstep.visualization.dfa_exporter import export_automaton_to_dot

logger = logging.getLogger(__name__)

DOT_TIMEOUT = 10.0


class RenderError(RuntimeError):
    pass


def _run_dot(dot_source: str, timeout: float) -> str:
    exe = shutil.which("dot")
    if not exe:
        raise RenderError("GraphViz 'dot' executable not found in PATH.")
    try:
        process = subprocess.run([exe, "-Tsvg"], input=dot_source, capture_output=True,
                                 text=True, check=True, encoding="utf-8", timeout=timeout)
    except subprocess.CalledProcessError as e:
        raise RenderError(f"GraphViz Error: {e.stderr.strip()}") from e
    except (OSError, subprocess.TimeoutExpired) as e:
        raise RenderError(f"Rendering Error: {e}") from e
    return process.stdout


def frame_title(ac: Automaton, highlight: Optional[int] = None) -> str:
    title = f"{len(ac.patterns)} patterns, {len(ac)} states"
    if highlight is not None:
        title += f", at state {highlight}"
    return title


def render_automaton_svg(ac: Automaton, highlight: Optional[int] = None,
                         fail_path: Iterable[int] = (), timeout: float = DOT_TIMEOUT) -> str:
    """
    Render one animation frame of the automaton.

    highlight is the state a step ended in; fail_path the states it visited
    through failure links. Output links are drawn so multi-pattern hits are
    visible alongside the goto edges.
    """
    dot = export_automaton_to_dot(ac, include_output_links=True,
                                  highlight=highlight, fail_path=fail_path)
    try:
        return _run_dot(dot, timeout)
    except RenderError as e:
        logger.warning("Could not render frame (%s): %s", frame_title(ac, highlight), e)
        return error_svg(str(e), title=frame_title(ac, highlight))


def error_svg(msg: str, title: str = "") -> str:
    """Inline SVG showing an error message; all text is escaped."""
    heading = (f'<text x="50%" y="25%" text-anchor="middle" font-family="monospace">'
               f'{html.escape(title)}</text>') if title else ""
    return (
        '<svg width="400" height="100" xmlns="http://www.w3.org/2000/svg">'
        '<rect width="100%" height="100%" fill="#fee"/>'
        f'{heading}'
        '<text x="50%" y="60%" dominant-baseline="middle" text-anchor="middle" '
        f'fill="red" font-family="monospace">{html.escape(msg)}</text>'
        '</svg>'
    )
