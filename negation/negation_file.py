from __future__ import annotations
import os
from typing import Optional


def _resolve_locator(locator: str, base_dir: Optional[str]) -> str:
    # locator is 'file://...' or a plain filesystem path
    if not locator.startswith("file://"):
        if os.path.isabs(locator):
            return locator
        if locator.startswith("~"):
            return os.path.expanduser(locator)
        base = base_dir or os.getcwd()
        return os.path.normpath(os.path.join(base, locator))
    rest = locator[7:]  # after 'file://'
    # Absolute filesystem root
    if rest.startswith("/"):
        return "/" + rest.lstrip("/")
    # Home directory
    if rest.startswith("~"):
        tail = rest[1:]
        return os.path.expanduser("~" + (tail if tail.startswith("/") else ("/" + tail if tail else "")))
    # Empty → base dir or CWD
    if rest == "":
        return base_dir or os.getcwd()
    # ./, ../ and bare names are relative to the base dir (or CWD)
    base = base_dir or os.getcwd()
    return os.path.normpath(os.path.join(base, rest))


async def file_get(locator: str, *, base_dir: Optional[str] = None, encoding: str = "utf-8") -> str:
    """Return the text of the program at `locator`."""
    path = _resolve_locator(locator, base_dir)
    if os.path.isdir(path):
        raise IsADirectoryError(f"Not a program file: {path}")
    # newline='' keeps CR and CR LF intact for the scanner
    with open(path, "r", encoding=encoding, newline="") as f:
        return f.read()


__all__ = ["file_get"]
