from .terminal import LineInput, ByteInput, OutputSink, raw_input_mode
