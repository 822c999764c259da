from __future__ import annotations

import os


def write_txt(text: str, out_path: str) -> str:
    """Write formatted text as UTF-8, ending with a single newline."""
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(text.rstrip("\n") + "\n")
    return out_path
