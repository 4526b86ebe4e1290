from .errors import PeerlinkError, SetupError
from .connection import accept_one, connect_to
from .reassembler import LineReassembler, RawReassembler
from .multiplexer import Multiplexer, FramedMultiplexer, RawMultiplexer, Reason, Termination, send_all, CHUNK_SIZE
from .tubes import LineInput, ByteInput, OutputSink, raw_input_mode
