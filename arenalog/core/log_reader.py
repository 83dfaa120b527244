"""
Reading JSON payloads out of Player.log.

Arena writes most messages as one JSON object on a single line after a
log prefix, but large game state messages are pretty-printed across many
lines. JsonStreamParser stitches those back together; PlayerLogReader
tracks how far into the file we have read.
"""
import logging
import os
from typing import List, Optional

logger = logging.getLogger(__name__)

# A runaway object (an unbalanced '{' in log noise) is dropped past this size
MAX_BUFFER_CHARS = 16 * 1024 * 1024


class JsonStreamParser:
    """
    Robust JSON stream parser that correctly handles braces within strings.

    Uses a simple state machine to track:
    - Whether we're inside a string
    - Escape sequences within strings
    - Actual JSON depth (ignoring braces in strings)

    State carries across calls to ``feed`` so objects may span lines, and a
    single line may close one object and open the next.
    """

    def __init__(self):
        self.buffer: List[str] = []
        self.depth: int = 0
        self.in_string: bool = False
        self.escaped: bool = False
        self._buffered_chars: int = 0

    def feed(self, line: str) -> List[str]:
        """
        Feed a line of text to the parser.

        Returns:
            Every complete JSON object text finished by this line (possibly none).
        """
        completed = []
        start = 0

        if self.depth == 0:
            start = line.find('{')
            if start == -1:
                return completed

        segment_start = start
        i = start
        length = len(line)
        while i < length:
            char = line[i]

            if self.depth == 0:
                # Between objects: skip to the next opening brace
                if char != '{':
                    i += 1
                    continue
                segment_start = i

            if self.escaped:
                self.escaped = False
            elif char == '\\' and self.in_string:
                self.escaped = True
            elif char == '"':
                self.in_string = not self.in_string
            elif not self.in_string:
                if char == '{':
                    self.depth += 1
                elif char == '}':
                    self.depth -= 1
                    if self.depth == 0:
                        self.buffer.append(line[segment_start:i + 1])
                        completed.append("".join(self.buffer))
                        self.buffer = []
                        self._buffered_chars = 0
            i += 1

        if self.depth > 0:
            piece = line[segment_start:]
            self.buffer.append(piece)
            self._buffered_chars += len(piece)
            if self._buffered_chars > MAX_BUFFER_CHARS:
                logging.warning(f"Dropping unterminated JSON object after {self._buffered_chars} chars")
                self.reset()
        elif self.depth < 0:
            logging.warning(f"JSON depth corruption detected (depth={self.depth}). Resetting parser.")
            self.reset()

        return completed

    def reset(self):
        """Reset parser state."""
        self.buffer = []
        self.depth = 0
        self.in_string = False
        self.escaped = False
        self._buffered_chars = 0


class PlayerLogReader:
    """
    Cursor over one incarnation of Player.log.

    Starts at the beginning of the file and only hands out complete lines;
    a trailing line without its newline is held back until the rest of it
    is written. A reader is never rewound: when the log rotates the
    ingestion service builds a new one.
    """

    def __init__(self, log_path: str):
        self.log_path = log_path
        # Raises FileNotFoundError if the log doesn't exist yet
        self.file = open(log_path, 'r', encoding='utf-8', errors='replace', newline='')
        self.inode: Optional[int] = os.fstat(self.file.fileno()).st_ino
        self.lines_read = 0
        self._partial = ""
        self._parser = JsonStreamParser()
        logger.info(f"Opened {log_path} (inode {self.inode})")

    def read_lines(self) -> List[str]:
        """Return the complete lines appended since the last call."""
        lines = []
        while True:
            chunk = self.file.readline()
            if not chunk:
                break
            if not chunk.endswith('\n'):
                self._partial += chunk
                break
            line = (self._partial + chunk).rstrip('\r\n')
            self._partial = ""
            lines.append(line)
        self.lines_read += len(lines)
        return lines

    def read_available(self) -> List[str]:
        """Return the JSON object texts completed by newly appended lines."""
        candidates = []
        for line in self.read_lines():
            candidates.extend(self._parser.feed(line))
        if candidates and logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Read {len(candidates)} JSON candidates from {self.log_path}")
        return candidates

    def close(self):
        if self.file:
            self.file.close()
            self.file = None

    def __enter__(self) -> "PlayerLogReader":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
