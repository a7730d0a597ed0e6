"""BLAKE3 hashing (default 32-byte output, unkeyed mode)."""

from __future__ import annotations

import struct

_MASK = 0xFFFFFFFF
_BLOCK_LEN = 64
_CHUNK_LEN = 1024
_OUT_LEN = 32

_CHUNK_START = 1 << 0
_CHUNK_END = 1 << 1
_PARENT = 1 << 2
_ROOT = 1 << 3

_IV = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

_MSG_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)

# (a, b, c, d, index of first message word) for the eight G calls of a round.
_ROUND_SCHEDULE = (
    (0, 4, 8, 12, 0),
    (1, 5, 9, 13, 2),
    (2, 6, 10, 14, 4),
    (3, 7, 11, 15, 6),
    (0, 5, 10, 15, 8),
    (1, 6, 11, 12, 10),
    (2, 7, 8, 13, 12),
    (3, 4, 9, 14, 14),
)

_WORDS = struct.Struct("<16I")
_CV_WORDS = struct.Struct("<8I")


def _g(state: list[int], a: int, b: int, c: int, d: int, x: int, y: int) -> None:
    sa = (state[a] + state[b] + x) & _MASK
    sd = state[d] ^ sa
    sd = ((sd >> 16) | (sd << 16)) & _MASK
    sc = (state[c] + sd) & _MASK
    sb = state[b] ^ sc
    sb = ((sb >> 12) | (sb << 20)) & _MASK
    sa = (sa + sb + y) & _MASK
    sd ^= sa
    sd = ((sd >> 8) | (sd << 24)) & _MASK
    sc = (sc + sd) & _MASK
    sb ^= sc
    sb = ((sb >> 7) | (sb << 25)) & _MASK
    state[a], state[b], state[c], state[d] = sa, sb, sc, sd


def _compress(
    chaining_value: tuple[int, ...],
    block_words: tuple[int, ...],
    counter: int,
    block_len: int,
    flags: int,
) -> list[int]:
    state = [
        *chaining_value,
        *_IV[:4],
        counter & _MASK,
        (counter >> 32) & _MASK,
        block_len,
        flags,
    ]
    message = list(block_words)
    for round_number in range(7):
        for a, b, c, d, mi in _ROUND_SCHEDULE:
            _g(state, a, b, c, d, message[mi], message[mi + 1])
        if round_number < 6:
            message = [message[p] for p in _MSG_PERMUTATION]
    head = [s ^ t for s, t in zip(state[:8], state[8:])]
    tail = [s ^ cv for s, cv in zip(state[8:], chaining_value)]
    return head + tail


def _block_words(block: bytes) -> tuple[int, ...]:
    return _WORDS.unpack(block.ljust(_BLOCK_LEN, b"\0"))


class _Output:
    """A compression whose result may be used as a chaining value or root."""

    __slots__ = ("input_cv", "block_words", "counter", "block_len", "flags")

    def __init__(
        self,
        input_cv: tuple[int, ...],
        block_words: tuple[int, ...],
        counter: int,
        block_len: int,
        flags: int,
    ) -> None:
        self.input_cv = input_cv
        self.block_words = block_words
        self.counter = counter
        self.block_len = block_len
        self.flags = flags

    def chaining_value(self) -> tuple[int, ...]:
        words = _compress(
            self.input_cv, self.block_words, self.counter, self.block_len, self.flags
        )
        return tuple(words[:8])

    def root_bytes(self, length: int) -> bytes:
        out = bytearray()
        block_counter = 0
        while len(out) < length:
            words = _compress(
                self.input_cv,
                self.block_words,
                block_counter,
                self.block_len,
                self.flags | _ROOT,
            )
            out += _WORDS.pack(*words)
            block_counter += 1
        return bytes(out[:length])


class _ChunkState:
    __slots__ = ("chaining_value", "chunk_counter", "block", "blocks_compressed", "flags")

    def __init__(self, key: tuple[int, ...], chunk_counter: int, flags: int) -> None:
        self.chaining_value = key
        self.chunk_counter = chunk_counter
        self.block = bytearray()
        self.blocks_compressed = 0
        self.flags = flags

    def __len__(self) -> int:
        return _BLOCK_LEN * self.blocks_compressed + len(self.block)

    def _start_flag(self) -> int:
        return _CHUNK_START if self.blocks_compressed == 0 else 0

    def update(self, data: memoryview) -> None:
        while data:
            if len(self.block) == _BLOCK_LEN:
                words = _compress(
                    self.chaining_value,
                    _block_words(bytes(self.block)),
                    self.chunk_counter,
                    _BLOCK_LEN,
                    self.flags | self._start_flag(),
                )
                self.chaining_value = tuple(words[:8])
                self.blocks_compressed += 1
                self.block.clear()
            take = min(_BLOCK_LEN - len(self.block), len(data))
            self.block += data[:take]
            data = data[take:]

    def output(self) -> _Output:
        return _Output(
            self.chaining_value,
            _block_words(bytes(self.block)),
            self.chunk_counter,
            len(self.block),
            self.flags | self._start_flag() | _CHUNK_END,
        )


def _parent_output(
    left: tuple[int, ...], right: tuple[int, ...], key: tuple[int, ...], flags: int
) -> _Output:
    return _Output(key, left + right, 0, _BLOCK_LEN, _PARENT | flags)


class Blake3:
    """Incremental BLAKE3 hasher producing a 32-byte digest."""

    digest_size = _OUT_LEN
    block_size = _BLOCK_LEN
    name = "blake3"

    def __init__(self, data: bytes = b"") -> None:
        self._key = _IV
        self._flags = 0
        self._chunk_state = _ChunkState(self._key, 0, self._flags)
        self._cv_stack: list[tuple[int, ...]] = []
        if data:
            self.update(data)

    def _add_chunk_chaining_value(self, new_cv: tuple[int, ...], total_chunks: int) -> None:
        # Merge completed subtrees: one merge per trailing zero bit of the count.
        while total_chunks & 1 == 0:
            left = self._cv_stack.pop()
            new_cv = _parent_output(left, new_cv, self._key, self._flags).chaining_value()
            total_chunks >>= 1
        self._cv_stack.append(new_cv)

    def update(self, data: bytes) -> "Blake3":
        """Feed more bytes into the hasher."""
        if isinstance(data, str):
            raise TypeError("Strings must be encoded before hashing")
        with memoryview(data) as raw:
            view = raw.cast("B")
            while view:
                if len(self._chunk_state) == _CHUNK_LEN:
                    chunk_cv = self._chunk_state.output().chaining_value()
                    total_chunks = self._chunk_state.chunk_counter + 1
                    self._add_chunk_chaining_value(chunk_cv, total_chunks)
                    self._chunk_state = _ChunkState(self._key, total_chunks, self._flags)
                take = min(_CHUNK_LEN - len(self._chunk_state), len(view))
                self._chunk_state.update(view[:take])
                view = view[take:]
            view.release()
        return self

    def digest(self) -> bytes:
        """Return the 32-byte digest of everything fed so far."""
        output = self._chunk_state.output()
        for left in reversed(self._cv_stack):
            output = _parent_output(left, output.chaining_value(), self._key, self._flags)
        return output.root_bytes(_OUT_LEN)

    def hexdigest(self) -> str:
        """Return the digest as a lowercase hexadecimal string."""
        return self.digest().hex()


def blake3_hex(data: bytes) -> str:
    """Return the hexadecimal BLAKE3 hash of ``data``."""
    return Blake3(data).hexdigest()