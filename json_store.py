from __future__ import annotations

from pathlib import Path


def read_text(path: Path) -> str | None:
    """
    Read a UTF-8 text file from disk.

    Returns None for missing files. Unlike a lenient JSON reader this does not
    hide corrupt content: parsing is left to the caller so it can report it.
    """
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def atomic_write_text(path: Path, text: str) -> None:
    """
    Atomically write text to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(text)
    tmp_path.replace(path)
