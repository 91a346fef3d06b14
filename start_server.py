#!/usr/bin/env python3
"""Start uvicorn for the delivery API, honouring the PORT environment variable."""

import os
import subprocess
import sys

port = os.environ.get("PORT", "8000")
try:
    port_int = int(port)
except ValueError:
    print(f"Warning: Invalid PORT value '{port}', using default 8000", file=sys.stderr)
    port_int = 8000

# Make the src/ layout importable without an editable install
src_path = os.path.abspath("src")
if not os.path.isdir(src_path):
    print(f"Warning: src directory not found at {src_path}", file=sys.stderr)
    src_path = os.getcwd()
pythonpath = os.environ.get("PYTHONPATH", "")
os.environ["PYTHONPATH"] = f"{src_path}:{pythonpath}" if pythonpath else src_path
sys.path.insert(0, src_path)

log_level = os.environ.get("FITBOX_LOG_LEVEL", "info").lower()

cmd = [
    sys.executable,
    "-m",
    "uvicorn",
    "fitbox.main:app",
    "--host",
    "0.0.0.0",
    "--port",
    str(port_int),
    "--log-level",
    log_level,
    # Client IPs for rate limiting arrive through the proxy's forwarded headers
    "--proxy-headers",
    "--forwarded-allow-ips", "*",
]

print(f"Starting delivery API on port {port_int} (PYTHONPATH={os.environ['PYTHONPATH']})", file=sys.stderr)

try:
    import fitbox.main  # noqa: F401
except ImportError as e:
    print(f"❌ Failed to import fitbox.main: {e}", file=sys.stderr)
    sys.exit(1)

try:
    sys.exit(subprocess.call(cmd))
except KeyboardInterrupt:
    print("⚠️ Server interrupted by user", file=sys.stderr)
    sys.exit(0)
