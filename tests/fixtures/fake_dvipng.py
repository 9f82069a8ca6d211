"""Stand-in for dvipng: writes <base>.png from <base>.dvi."""

import sys
from pathlib import Path

base = sys.argv[1]
Path(f"{base}.dvi").read_bytes()
Path(f"{base}.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"dvipng")
