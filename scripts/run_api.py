#!/usr/bin/env python
"""
Run the moving tool API.

Usage:
    python scripts/run_api.py [--port 8000] [--data-dir ./data]
"""
import argparse
import subprocess
import sys
import os
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Start the FastAPI server")
    parser.add_argument('--host', default="0.0.0.0")
    parser.add_argument('--port', default="8000")
    parser.add_argument('--data-dir', help="Directory holding the saved state slots")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path
    if args.data_dir:
        env["MOVING_TOOL_DATA_DIR"] = str(Path(args.data_dir).resolve())

    print("Starting Moving Tool API (FastAPI)...")
    try:
        # No --reload: state is saved on shutdown and a reload would drop it
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "moving_tool.api.main:app",
            "--host", args.host,
            "--port", str(args.port),
        ], env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
