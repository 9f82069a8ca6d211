"""Stand-in for rsvg-convert: writes a PNG-signed payload to stdout."""

import sys
from pathlib import Path

svg = Path(sys.argv[1]).read_bytes()
sys.stdout.buffer.write(b"\x89PNG\r\n\x1a\n" + b"rsvg:" + str(len(svg)).encode())
