"""Tests for splitting received bytes back into messages."""

from hypothesis import given
from hypothesis import strategies as st

from peerlink import LineReassembler, RawReassembler

messages_strategy = st.lists(st.binary().map(lambda b: b.replace(b"\n", b"")), max_size=20)


def split_at(data: bytes, cuts: list[int]) -> list[bytes]:
    points = sorted({cut % (len(data) + 1) for cut in cuts})
    bounds = [0, *points, len(data)]
    return [data[start:end] for start, end in zip(bounds, bounds[1:])]


class TestLineReassembler:
    def test_partial_message_waits_for_terminator(self) -> None:
        reassembler = LineReassembler()

        assert reassembler.feed(b"hel") == []
        assert reassembler.pending == b"hel"
        assert reassembler.feed(b"lo\n") == [b"hello"]
        assert reassembler.pending == b""

    def test_multiple_messages_in_one_chunk(self) -> None:
        assert LineReassembler().feed(b"a\nb\nc\n") == [b"a", b"b", b"c"]

    def test_tail_is_kept_after_complete_messages(self) -> None:
        reassembler = LineReassembler()

        assert reassembler.feed(b"one\ntw") == [b"one"]
        assert reassembler.pending == b"tw"

    def test_empty_lines_are_messages(self) -> None:
        assert LineReassembler().feed(b"\n\nx\n") == [b"", b"", b"x"]

    def test_flush_returns_and_clears_tail(self) -> None:
        reassembler = LineReassembler()
        reassembler.feed(b"dangling")

        assert reassembler.flush() == b"dangling"
        assert reassembler.flush() is None

    def test_reset_discards_pending(self) -> None:
        reassembler = LineReassembler()
        reassembler.feed(b"stale")
        reassembler.reset()

        assert reassembler.feed(b"fresh\n") == [b"fresh"]

    def test_custom_terminator(self) -> None:
        assert LineReassembler(terminator=b"\r\n").feed(b"a\r\nb\r") == [b"a"]

    @given(messages=messages_strategy, cuts=st.lists(st.integers(min_value=0), max_size=10))
    def test_chunking_does_not_change_messages(self, messages: list[bytes], cuts: list[int]) -> None:
        """Messages come out identical and in order however the stream is split."""
        stream = b"".join(message + b"\n" for message in messages)
        reassembler = LineReassembler()

        received = []
        for chunk in split_at(stream, cuts):
            received.extend(reassembler.feed(chunk))
            assert b"\n" not in reassembler.pending

        assert received == messages
        assert reassembler.flush() is None


class TestRawReassembler:
    def test_passes_chunk_through(self) -> None:
        assert RawReassembler().feed(b"\x1b[A") == [b"\x1b[A"]

    def test_empty_chunk_produces_nothing(self) -> None:
        assert RawReassembler().feed(b"") == []

    def test_never_holds_a_tail(self) -> None:
        reassembler = RawReassembler()
        reassembler.feed(b"abc")

        assert reassembler.flush() is None
