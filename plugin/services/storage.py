"""
LogStore Class - Handles file I/O operations

This module reads append-only log files from the end towards the beginning.
"""

import os
from typing import BinaryIO, Iterator

from models.errors import LogUnavailable

DEFAULT_BLOCK_SIZE = 8192


class LogStore:
    """
    Reads one append-only log file.
    Responsibilities:
    - Check that the log file is readable
    - Yield lines newest first without loading the whole file
    """

    def __init__(self, file_path: str, block_size: int = DEFAULT_BLOCK_SIZE):
        self.file_path = file_path
        self.block_size = block_size

    def is_readable(self) -> bool:
        """True if the file exists and the current user may read it"""
        return os.path.isfile(self.file_path) and os.access(self.file_path, os.R_OK)

    def read_lines_reversed(self) -> Iterator[str]:
        """
        Iterator over non-empty lines, last line first.
        Reads fixed-size blocks backwards from the end of the file. The file
        is closed as soon as the caller stops iterating.
        """
        try:
            f = open(self.file_path, "rb")
        except OSError as exc:
            raise LogUnavailable(self.file_path, exc.strerror or str(exc)) from exc

        with f:
            try:
                yield from self._read_blocks(f)
            except OSError as exc:
                raise LogUnavailable(self.file_path, exc.strerror or str(exc)) from exc

    def _read_blocks(self, f: BinaryIO) -> Iterator[str]:
        f.seek(0, os.SEEK_END)
        pos = f.tell()
        remainder = b""

        while pos > 0:
            read_size = min(self.block_size, pos)
            pos -= read_size
            f.seek(pos)
            chunk = f.read(read_size) + remainder

            # The first piece may be the tail of a line that starts in an
            # earlier block; keep it until that block is read.
            pieces = chunk.split(b"\n")
            remainder = pieces.pop(0)
            for raw in reversed(pieces):
                line = self._decode(raw)
                if line:
                    yield line

        line = self._decode(remainder)
        if line:
            yield line

    @staticmethod
    def _decode(raw: bytes) -> str:
        return raw.decode("utf-8", errors="replace").strip()
