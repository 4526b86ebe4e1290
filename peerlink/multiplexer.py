import enum
import socket
import logging
import selectors

from .reassembler import LineReassembler, RawReassembler, TERMINATOR
from .tubes.utils import log


logger = logging.getLogger('peerlink.multiplexer')

CHUNK_SIZE = 4096
PEER_PREFIX = b'[peer] '


class Reason(enum.Enum):
    LOCAL_INPUT_CLOSED = 'stdin closed; goodbye'
    PEER_DISCONNECTED = 'peer disconnected'
    LOCAL_IO_ERROR = 'local I/O failed'
    REMOTE_IO_ERROR = 'connection to peer failed'
    INTERRUPTED = 'interrupted'


class Termination:
    def __init__(self, reason, error=None):
        self.reason = reason
        self.error = error

    @property
    def fatal(self):
        return self.error is not None

    @property
    def exit_code(self):
        return 1 if self.fatal else 0

    @property
    def message(self):
        if self.error is None:
            return self.reason.value
        reason_text = self.error.strerror or str(self.error)
        return f'{self.reason.value}: {reason_text}'

    def __repr__(self):
        return f'Termination({self.reason.name}, error={self.error!r})'


def send_all(conn, data):
    """Send every byte of data, returning how many send calls it took.

    Raises ConnectionError if the peer accepts nothing mid-transfer; any
    other OSError from the transport propagates.
    """
    view = memoryview(data)
    attempts = 0
    while view:
        try:
            sent = conn.send(view)
        except InterruptedError:
            continue
        attempts += 1
        if sent == 0:
            raise ConnectionError(f'peer stopped accepting data with {len(view)} bytes unsent')
        view = view[sent:]
    return attempts


class Multiplexer:
    """Shuttle data between local input and one connection until either side stops.

    Both handles are watched with a single readiness wait. Subclasses decide
    how local input is framed and how remote data reaches the sink.
    """

    def __init__(self,
                 conn,
                 local_input,
                 sink,
                 *,
                 selector_factory=selectors.DefaultSelector,
                 chunk_size=CHUNK_SIZE,
                 half_close=False):
        self.conn = conn
        self.local_input = local_input
        self.sink = sink
        self.selector_factory = selector_factory
        self.chunk_size = chunk_size
        self.half_close = half_close
        self.reassembler = self.create_reassembler()
        self.selector = None
        self.closed = False

    def create_reassembler(self):
        raise NotImplementedError

    def on_local(self):
        raise NotImplementedError

    def deliver(self, data):
        raise NotImplementedError

    def close(self):
        if self.closed:
            return
        self.closed = True
        self.conn.close()
        logger.debug('connection closed')

    @log(logger)
    def forward(self, data):
        try:
            send_all(self.conn, data)
        except OSError as e:
            return Termination(Reason.REMOTE_IO_ERROR, e)
        return None

    @log(logger)
    def data_received(self, data):
        try:
            for item in self.reassembler.feed(data):
                self.deliver(item)
        except OSError as e:
            return Termination(Reason.LOCAL_IO_ERROR, e)
        return None

    def on_remote(self):
        try:
            data = self.conn.recv(self.chunk_size)
        except InterruptedError:
            return None
        except OSError as e:
            return Termination(Reason.REMOTE_IO_ERROR, e)
        if not data:
            return Termination(Reason.PEER_DISCONNECTED)
        return self.data_received(data)

    def end_of_input(self):
        if not self.half_close:
            return Termination(Reason.LOCAL_INPUT_CLOSED)
        self.selector.unregister(self.local_input)
        try:
            self.conn.shutdown(socket.SHUT_WR)
        except OSError as e:
            return Termination(Reason.REMOTE_IO_ERROR, e)
        logger.info('stdin closed; waiting for peer to finish')
        return None

    def loop(self):
        while True:
            try:
                events = self.selector.select()
            except InterruptedError:
                logger.debug('readiness wait interrupted, retrying')
                continue
            except OSError as e:
                return Termination(Reason.INTERRUPTED, e)

            ready = {key.fileobj for key, mask in events}
            for fileobj, handler in ((self.local_input, self.on_local),
                                     (self.conn, self.on_remote)):
                if fileobj in ready:
                    termination = handler()
                    if termination:
                        return termination

    def flush(self, termination):
        tail = self.reassembler.flush()
        if tail is None:
            return termination
        logger.debug(f'delivering {len(tail)} unterminated trailing bytes')
        try:
            self.deliver(tail)
        except OSError as e:
            if not termination.fatal:
                return Termination(Reason.LOCAL_IO_ERROR, e)
            logger.debug(f'trailing bytes dropped: {e}')
        return termination

    def run(self):
        self.reassembler.reset()
        self.selector = self.selector_factory()
        try:
            self.selector.register(self.local_input, selectors.EVENT_READ)
            self.selector.register(self.conn, selectors.EVENT_READ)
            try:
                termination = self.loop()
            except KeyboardInterrupt:
                termination = Termination(Reason.INTERRUPTED)
            termination = self.flush(termination)
        finally:
            self.selector.close()
            self.close()

        if termination.fatal:
            logger.error(termination.message)
        else:
            logger.info(termination.message)
        return termination


class FramedMultiplexer(Multiplexer):
    def __init__(self, *args, prefix=PEER_PREFIX, terminator=TERMINATOR, **kwargs):
        self.prefix = prefix
        self.terminator = terminator
        super().__init__(*args, **kwargs)

    def create_reassembler(self):
        return LineReassembler(self.terminator)

    def on_local(self):
        try:
            lines = self.local_input.read_lines()
        except OSError as e:
            return Termination(Reason.LOCAL_IO_ERROR, e)
        if lines is None:
            return self.end_of_input()
        for line in lines:
            termination = self.forward(line + self.terminator)
            if termination:
                return termination
        return None

    def deliver(self, message):
        self.sink.write_line(self.prefix + message)


class RawMultiplexer(Multiplexer):
    def create_reassembler(self):
        return RawReassembler()

    def on_local(self):
        try:
            byte = self.local_input.read_byte()
            if byte is None:
                return self.end_of_input()
            # raw_input_mode turned terminal echo off
            self.sink.write_bytes(byte)
        except OSError as e:
            return Termination(Reason.LOCAL_IO_ERROR, e)
        return self.forward(byte)

    def deliver(self, chunk):
        self.sink.write_bytes(chunk)
