# src/acstep/dashboard_runner.py

# CRITICAL: Monkey patch MUST be first, before any other imports
import eventlet
eventlet.monkey_patch()

import argparse
import logging

from acstep.automaton import InvalidPatternError
from acstep.dashboard.server import DEFAULT_PATTERNS_PATH, create_app, socketio
from acstep.patterns import load_patterns_file


def run_dashboard(patterns_path, host="127.0.0.1", port=5000, debug=False):
    patterns = load_patterns_file(patterns_path) if patterns_path else None
    app = create_app(patterns, async_mode="eventlet")

    print(f"[+] Starting stepper dashboard at http://{host}:{port}")
    socketio.run(app, host=host, port=port, debug=debug)


def main():
    parser = argparse.ArgumentParser(description="Aho-Corasick stepper dashboard")
    parser.add_argument("--patterns", default=None,
                        help=f"Pattern file path (default: {DEFAULT_PATTERNS_PATH} if present)")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        run_dashboard(args.patterns, host=args.host, port=args.port, debug=args.debug)
    except (InvalidPatternError, OSError) as e:
        parser.exit(2, f"[-] {e}\n")


if __name__ == "__main__":
    main()
