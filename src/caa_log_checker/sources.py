import gzip
from contextlib import contextmanager
from typing import Iterator


def _strip_newline(lines: Iterator[str]) -> Iterator[str]:
    for line in lines:
        yield line.rstrip("\r\n")


@contextmanager
def open_log(path: str) -> Iterator[Iterator[str]]:
    """
    Open a log file for line-by-line reading.

    Paths ending in .gz are decompressed transparently. The handle is closed
    when the with-block exits, including on errors.
    """
    if path.endswith(".gz"):
        f = gzip.open(path, "rt", encoding="utf-8", errors="replace")
    else:
        f = open(path, "r", encoding="utf-8", errors="replace")
    try:
        yield _strip_newline(iter(f))
    finally:
        f.close()
