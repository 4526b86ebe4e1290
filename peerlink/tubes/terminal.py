import os
import sys
import tty
import termios
import logging
import contextlib

from ..errors import SetupError
from .utils import log


logger = logging.getLogger('peerlink.tubes.terminal')

READ_SIZE = 4096


def _fileno(source):
    if source is None:
        return sys.stdin.fileno()
    if isinstance(source, int):
        return source
    return source.fileno()


class LineInput:
    def __init__(self, source=None, *, terminator=b'\n'):
        self.fd = _fileno(source)
        self.terminator = terminator
        self.partial = bytearray()
        self.eof = False

    def fileno(self):
        return self.fd

    @log(logger)
    def read_lines(self):
        """Return the complete lines readable now, or None once input has ended.

        At end of input an unterminated tail is returned as a last line, and
        the call after that returns None.
        """
        if self.eof:
            return None
        while True:
            try:
                data = os.read(self.fd, READ_SIZE)
                break
            except InterruptedError:
                continue
        if not data:
            self.eof = True
            if self.partial:
                tail = bytes(self.partial)
                self.partial.clear()
                return [tail]
            return None
        self.partial += data
        lines = []
        while True:
            index = self.partial.find(self.terminator)
            if index < 0:
                break
            lines.append(bytes(self.partial[:index]))
            del self.partial[:index + len(self.terminator)]
        return lines


class ByteInput:
    def __init__(self, source=None):
        self.fd = _fileno(source)

    def fileno(self):
        return self.fd

    @log(logger)
    def read_byte(self):
        while True:
            try:
                data = os.read(self.fd, 1)
                break
            except InterruptedError:
                continue
        return data or None


class OutputSink:
    def __init__(self, fileobj=None):
        self.fileobj = fileobj if fileobj is not None else sys.stdout.buffer

    def write_bytes(self, data):
        self.fileobj.write(data)
        self.fileobj.flush()

    def write_line(self, data):
        self.fileobj.write(data + b'\n')
        self.fileobj.flush()


@contextlib.contextmanager
def raw_input_mode(source=None):
    """Deliver keystrokes one at a time without echo until the block exits.

    ISIG stays enabled so Ctrl-C still raises KeyboardInterrupt.
    """
    fd = _fileno(source)
    try:
        original = termios.tcgetattr(fd)
    except termios.error as e:
        raise SetupError(f'tcgetattr failed: {e.args[-1]}') from e

    try:
        tty.setcbreak(fd, termios.TCSANOW)
    except termios.error as e:
        raise SetupError(f'tcsetattr failed: {e.args[-1]}') from e
    logger.debug(f'raw input mode enabled on fd {fd}')

    try:
        yield fd
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, original)
        logger.debug(f'input mode restored on fd {fd}')
