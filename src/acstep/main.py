# src/acstep/main.py

"""
Matcher runner:
    python -m acstep.main --patterns <file> --text "she sells seashells"
    python -m acstep.main -p he -p she --text-file <file> --step

Steps:
1. Load patterns (file and/or -p flags).
2. Normalize patterns and text the same way.
3. Build the automaton.
4. Scan, either in one batch or one symbol per step.
5. Print matches (or the DOT graph with --dot).

Offsets refer to the normalized text.
"""

import argparse
import json
import logging
import sys

from acstep.automaton import build_automaton
from acstep.normalizer import bytes_to_text, normalize_text
from acstep.patterns import load_patterns_file
from acstep.reference import brute_force_matches
from acstep.stepper import StepController
from acstep.visualization.dfa_exporter import export_automaton_to_dot


class VerificationError(RuntimeError):
    """Automaton output disagrees with the brute-force reference."""


def run_matcher(patterns, text: str, *, step=False, ignore_case=False,
                verify=False, verbose=False, dot=False):
    # 1. Normalize
    patterns = [normalize_text(p, to_lower=ignore_case) for p in patterns]
    text = normalize_text(text, to_lower=ignore_case)

    # 2. Build
    ac = build_automaton(patterns)

    if dot and (step or verify or verbose):
        raise ValueError("dot output cannot be combined with step, verify or verbose")
    if dot:
        print(export_automaton_to_dot(ac, include_output_links=True))
        return ac.find_all(text)

    # 3. Scan
    controller = StepController(ac, text)
    steps = controller.run()
    matches = controller.matches

    if verify:
        got = {(m.pattern_index, m.start, m.end) for m in matches}
        expected = brute_force_matches(ac.patterns, text)
        if got != expected or len(got) != len(matches):
            raise VerificationError(
                f"automaton/reference mismatch: missing={sorted(expected - got)} "
                f"extra={sorted(got - expected)}")

    # 4. Report
    if verbose:
        doc = {"patterns": list(ac.patterns), "text": text,
               "matches": [m.to_dict() for m in matches]}
        if step:
            doc["steps"] = [s.to_dict() for s in steps]
        print(json.dumps(doc, indent=2, ensure_ascii=False))
    elif step:
        for s in steps:
            fail = f" via fail {list(s.fail_path)}" if s.failed else ""
            print(f"[STEP] {s.position:>4} {s.symbol!r}: {s.source} -> {s.state}{fail}")
            for m in s.matches:
                print(f"         [MATCH] {m.pattern!r} [{m.start}, {m.end}]")
    else:
        for m in matches:
            print(f"[MATCH] {m.pattern!r} | start={m.start} end={m.end}")

    return matches


def main(argv=None):
    parser = argparse.ArgumentParser(description="Aho-Corasick multi-pattern matcher")
    parser.add_argument("--patterns", help="Pattern file, one pattern per line")
    parser.add_argument("-p", "--pattern", action="append", default=[], dest="extra",
                        help="Pattern (repeatable)")
    src = parser.add_mutually_exclusive_group(required=True)
    src.add_argument("--text", help="Text to scan")
    src.add_argument("--text-file", help="File whose contents are scanned")
    parser.add_argument("--step", action="store_true", help="Print every transition")
    parser.add_argument("--ignore-case", action="store_true", help="Case-fold patterns and text")
    parser.add_argument("--verify", action="store_true", help="Cross-check against brute force")
    parser.add_argument("--dot", action="store_true", help="Print the automaton as GraphViz DOT")
    parser.add_argument("--verbose", action="store_true", help="Verbose JSON output")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)
    if args.dot and (args.step or args.verify or args.verbose):
        parser.error("--dot cannot be combined with --step, --verify or --verbose")

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        patterns = load_patterns_file(args.patterns) if args.patterns else []
        patterns.extend(args.extra)
        if args.text_file:
            with open(args.text_file, "rb") as fh:
                text = bytes_to_text(fh.read())
        else:
            text = args.text
        matches = run_matcher(patterns, text, step=args.step, ignore_case=args.ignore_case,
                              verify=args.verify, verbose=args.verbose, dot=args.dot)
    except (ValueError, OSError) as e:
        # InvalidPatternError is a ValueError
        print(f"[-] {e}", file=sys.stderr)
        return 2
    except VerificationError as e:
        print(f"[-] {e}", file=sys.stderr)
        return 1

    if not args.verbose and not args.dot:
        print(f"[+] {len(matches)} matches.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
