import logging


logger = logging.getLogger('peerlink.reassembler')

TERMINATOR = b'\n'


class LineReassembler:
    """Split a received byte stream back into terminator-delimited messages.

    Bytes that do not yet form a complete message stay in `pending` until a
    later `feed` supplies the terminator.
    """

    def __init__(self, terminator=TERMINATOR):
        self.terminator = terminator
        self.pending = bytearray()

    def reset(self):
        self.pending.clear()

    def feed(self, data):
        self.pending += data
        messages = []
        while True:
            index = self.pending.find(self.terminator)
            if index < 0:
                break
            messages.append(bytes(self.pending[:index]))
            del self.pending[:index + len(self.terminator)]
        if self.pending:
            logger.debug(f'{len(self.pending)} bytes pending after feed')
        return messages

    def flush(self):
        if not self.pending:
            return None
        tail = bytes(self.pending)
        self.pending.clear()
        return tail


class RawReassembler:
    def reset(self):
        pass

    def feed(self, data):
        return [bytes(data)] if data else []

    def flush(self):
        return None
