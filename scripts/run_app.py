#!/usr/bin/env python
"""
Run the Streamlit moving operations dashboard.

Usage:
    python scripts/run_app.py [--port 8501] [--data-dir ./data] [--headless]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
UI_PATH = PROJECT_ROOT / 'src' / 'moving_tool' / 'ui' / 'app_streamlit.py'


def build_command(args) -> list[str]:
    """Streamlit command line for the dashboard."""
    cmd = [sys.executable, '-m', 'streamlit', 'run', str(UI_PATH), '--server.port', str(args.port)]
    if args.headless:
        cmd += ['--server.headless', 'true']
    return cmd


def build_env(args, base=None) -> dict:
    """Child environment: src on PYTHONPATH, optional state directory."""
    env = dict(os.environ if base is None else base)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT / 'src'), env.get("PYTHONPATH")]))
    if args.data_dir:
        env["MOVING_TOOL_DATA_DIR"] = str(Path(args.data_dir).resolve())
    return env


def main(argv=None):
    parser = argparse.ArgumentParser(description="Start the Streamlit dashboard")
    parser.add_argument('--port', type=int, default=8501)
    parser.add_argument('--data-dir', help="Directory holding the saved state slots")
    parser.add_argument('--headless', action='store_true', help="Do not open a browser")
    args = parser.parse_args(argv)

    if not UI_PATH.exists():
        print(f"ERROR: dashboard not found at {UI_PATH}")
        sys.exit(1)

    cmd = build_command(args)
    print(f"Starting dashboard on port {args.port}")
    try:
        subprocess.run(cmd, cwd=str(PROJECT_ROOT), env=build_env(args))
    except KeyboardInterrupt:
        print("\nDashboard stopped.")


if __name__ == "__main__":
    main()
