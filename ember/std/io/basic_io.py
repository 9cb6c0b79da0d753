import sys
from typing import List, Optional, TextIO


class OutputSink:
    """Receives everything an Ember program prints.

    The interpreter never writes to a stream itself; it formats values to
    text and hands them to a sink supplied by the host.
    """

    def write(self, text: str) -> None:
        raise NotImplementedError

    def write_line(self, text: str) -> None:
        self.write(text + '\n')


class ConsoleSink(OutputSink):
    """Writes program output to a text stream (stdout by default)."""
    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # looked up on each write so a replaced sys.stdout is used
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()


class BufferSink(OutputSink):
    """Collects program output in memory."""
    def __init__(self):
        self.parts: List[str] = []

    def write(self, text: str) -> None:
        self.parts.append(text)

    def getvalue(self) -> str:
        return ''.join(self.parts)

    @property
    def lines(self) -> List[str]:
        return self.getvalue().splitlines()

    def clear(self) -> None:
        self.parts.clear()
