"""A small D-Bus client: wire marshalling and a blocking method-call connection."""

from __future__ import annotations

import os
import socket
import struct
import time
from itertools import count
from typing import Any, Iterable, Mapping

from .variant import Variant

_FIXED = {
    "y": ("B", 1),
    "b": ("I", 4),
    "n": ("h", 2),
    "q": ("H", 2),
    "i": ("i", 4),
    "u": ("I", 4),
    "x": ("q", 8),
    "t": ("Q", 8),
    "d": ("d", 8),
    "h": ("I", 4),
}
_STRINGLIKE = "sog"
_HEADER_SIGNATURE = "yyyyuua(yv)"

_METHOD_CALL = 1
_METHOD_RETURN = 2
_ERROR = 3

_FIELD_PATH = 1
_FIELD_INTERFACE = 2
_FIELD_MEMBER = 3
_FIELD_ERROR_NAME = 4
_FIELD_REPLY_SERIAL = 5
_FIELD_DESTINATION = 6
_FIELD_SIGNATURE = 8

DEFAULT_TIMEOUT = 100
"""Method call timeout in milliseconds; some players never answer."""


class DBusError(Exception):
    """A D-Bus failure: an error reply, a transport problem or bad data."""

    def __init__(self, name: str, message: str = "") -> None:
        super().__init__(f"{name}: {message}" if message else name)
        self.name = name
        self.message = message


def _type_end(sig: str, i: int) -> int:
    try:
        c = sig[i]
        if c == "a":
            return _type_end(sig, i + 1)
        if c in "({":
            close = ")" if c == "(" else "}"
            j = i + 1
            while sig[j] != close:
                j = _type_end(sig, j)
            if j == i + 1:
                raise DBusError("org.freedesktop.DBus.Error.InvalidSignature", sig)
            return j + 1
        if c in _FIXED or c in _STRINGLIKE or c == "v":
            return i + 1
    except IndexError:
        pass
    raise DBusError("org.freedesktop.DBus.Error.InvalidSignature", sig)


def _split(sig: str) -> list[str]:
    types = []
    i = 0
    while i < len(sig):
        end = _type_end(sig, i)
        types.append(sig[i:end])
        i = end
    return types


def _alignment(t: str) -> int:
    c = t[0]
    if c in _FIXED:
        return _FIXED[c][1]
    if c in "soa":
        return 4
    if c in "({":
        return 8
    return 1


class _Writer:
    def __init__(self, endian: str) -> None:
        self.endian = endian
        self.buf = bytearray()

    def pad(self, n: int) -> None:
        self.buf.extend(b"\0" * (-len(self.buf) % n))

    def pack(self, fmt: str, value: Any) -> None:
        self.buf.extend(struct.pack(self.endian + fmt, value))

    def write(self, t: str, value: Any) -> None:
        c = t[0]
        if c in _FIXED:
            fmt, size = _FIXED[c]
            self.pad(size)
            self.pack(fmt, int(bool(value)) if c == "b" else value)
        elif c in "so":
            data = str(value).encode()
            self.pad(4)
            self.pack("I", len(data))
            self.buf.extend(data + b"\0")
        elif c == "g":
            data = str(value).encode()
            self.pack("B", len(data))
            self.buf.extend(data + b"\0")
        elif c == "v":
            if not isinstance(value, Variant):
                raise DBusError("org.freedesktop.DBus.Error.InvalidArgs", "variant expected")
            if len(_split(value.signature)) != 1:
                raise DBusError("org.freedesktop.DBus.Error.InvalidSignature", value.signature)
            self.write("g", value.signature)
            self.write(value.signature, value.value)
        elif c == "(":
            self.pad(8)
            members = _split(t[1:-1])
            values = list(value)
            if len(members) != len(values):
                raise DBusError("org.freedesktop.DBus.Error.InvalidArgs", "struct arity")
            for sub, item in zip(members, values):
                self.write(sub, item)
        elif c == "a":
            elem = t[1:]
            self.pad(4)
            at = len(self.buf)
            self.pack("I", 0)
            self.pad(_alignment(elem))
            start = len(self.buf)
            if elem[0] == "{":
                key_t, val_t = _split(elem[1:-1])
                pairs = value.items() if isinstance(value, Mapping) else value
                for key, item in pairs:
                    self.pad(8)
                    self.write(key_t, key)
                    self.write(val_t, item)
            else:
                for item in value:
                    self.write(elem, item)
            struct.pack_into(self.endian + "I", self.buf, at, len(self.buf) - start)


class _Reader:
    def __init__(self, data: bytes, endian: str) -> None:
        self.data = data
        self.endian = endian
        self.pos = 0

    def take(self, n: int) -> bytes:
        if self.pos + n > len(self.data):
            raise DBusError("org.freedesktop.DBus.Error.InvalidArgs", "truncated data")
        chunk = self.data[self.pos : self.pos + n]
        self.pos += n
        return chunk

    def pad(self, n: int) -> None:
        self.take(-self.pos % n)

    def unpack(self, fmt: str, size: int) -> Any:
        return struct.unpack(self.endian + fmt, self.take(size))[0]

    def read(self, t: str) -> Any:
        c = t[0]
        if c in _FIXED:
            fmt, size = _FIXED[c]
            self.pad(size)
            value = self.unpack(fmt, size)
            return bool(value) if c == "b" else value
        if c in "so":
            self.pad(4)
            length = self.unpack("I", 4)
            text = self.take(length + 1)[:-1]
            return text.decode("utf-8", "replace")
        if c == "g":
            length = self.unpack("B", 1)
            return self.take(length + 1)[:-1].decode("ascii", "replace")
        if c == "v":
            sig = self.read("g")
            if len(_split(sig)) != 1:
                raise DBusError("org.freedesktop.DBus.Error.InvalidSignature", sig)
            return Variant(sig, self.read(sig))
        if c == "(":
            self.pad(8)
            return tuple(self.read(sub) for sub in _split(t[1:-1]))
        # array
        elem = t[1:]
        self.pad(4)
        length = self.unpack("I", 4)
        self.pad(_alignment(elem))
        end = self.pos + length
        if end > len(self.data):
            raise DBusError("org.freedesktop.DBus.Error.InvalidArgs", "truncated data")
        if elem[0] == "{":
            key_t, val_t = _split(elem[1:-1])
            result: dict[Any, Any] = {}
            while self.pos < end:
                self.pad(8)
                key = self.read(key_t)
                result[key] = self.read(val_t)
            return result
        items = []
        while self.pos < end:
            items.append(self.read(elem))
        return items


def marshal(signature: str, values: Iterable[Any], endian: str = "<") -> bytes:
    """Encode ``values`` following ``signature`` in D-Bus wire format."""
    types = _split(signature)
    values = list(values)
    if len(types) != len(values):
        raise DBusError("org.freedesktop.DBus.Error.InvalidArgs", "argument count mismatch")
    writer = _Writer(endian)
    for t, value in zip(types, values):
        writer.write(t, value)
    return bytes(writer.buf)


def unmarshal(signature: str, data: bytes, endian: str = "<") -> list[Any]:
    """Decode D-Bus wire data following ``signature``; variants become :class:`Variant`."""
    reader = _Reader(bytes(data), endian)
    return [reader.read(t) for t in _split(signature)]


def session_bus_address(environ: Mapping[str, str] | None = None) -> str:
    """Return the socket address of the session bus (abstract names start with NUL)."""
    env = os.environ if environ is None else environ
    address = env.get("DBUS_SESSION_BUS_ADDRESS", "")
    if not address:
        raise DBusError("org.freedesktop.DBus.Error.NoServer", "no session bus address")
    for entry in address.split(";"):
        transport, _, rest = entry.partition(":")
        if transport != "unix":
            continue
        params = dict(p.partition("=")[::2] for p in rest.split(",") if p)
        if "path" in params:
            return params["path"]
        if "abstract" in params:
            return "\0" + params["abstract"]
    raise DBusError("org.freedesktop.DBus.Error.BadAddress", address)


class Connection:
    """A blocking connection to a message bus over a stream socket."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._buffer = bytearray()
        self._serials = count(1)

    def _authenticate(self) -> None:
        uid_hex = str(os.getuid()).encode().hex()
        self._sock.sendall(b"\0AUTH EXTERNAL " + uid_hex.encode() + b"\r\n")
        line = self._read_line(time.monotonic() + 5)
        if not line.startswith(b"OK"):
            raise DBusError("org.freedesktop.DBus.Error.AuthFailed", line.decode("ascii", "replace"))
        self._sock.sendall(b"BEGIN\r\n")

    def _read_line(self, deadline: float) -> bytes:
        while b"\r\n" not in self._buffer:
            self._fill(deadline)
        line, _, rest = bytes(self._buffer).partition(b"\r\n")
        self._buffer = bytearray(rest)
        return line

    def _fill(self, deadline: float) -> None:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise DBusError("org.freedesktop.DBus.Error.NoReply", "timed out")
        self._sock.settimeout(remaining)
        try:
            chunk = self._sock.recv(65536)
        except socket.timeout:
            raise DBusError("org.freedesktop.DBus.Error.NoReply", "timed out") from None
        except OSError as exc:
            raise DBusError("org.freedesktop.DBus.Error.Disconnected", str(exc)) from exc
        if not chunk:
            raise DBusError("org.freedesktop.DBus.Error.Disconnected", "connection closed")
        self._buffer.extend(chunk)

    def _recv_exact(self, n: int, deadline: float) -> bytes:
        while len(self._buffer) < n:
            self._fill(deadline)
        data = bytes(self._buffer[:n])
        del self._buffer[:n]
        return data

    def _read_message(self, deadline: float) -> tuple[int, dict[int, Any], list[Any]]:
        fixed = self._recv_exact(16, deadline)
        endian = "<" if fixed[0:1] == b"l" else ">"
        body_len, _, fields_len = struct.unpack(endian + "III", fixed[4:16])
        header_len = 16 + fields_len
        padded = header_len + (-header_len % 8)
        data = fixed + self._recv_exact(padded - 16 + body_len, deadline)
        header = unmarshal(_HEADER_SIGNATURE, data[:header_len], endian)
        fields = {code: var.value for code, var in header[6]}
        body = unmarshal(fields.get(_FIELD_SIGNATURE, ""), data[padded:], endian)
        return header[1], fields, body

    def call(
        self,
        destination: str,
        path: str,
        interface: str | None,
        method: str,
        signature: str = "",
        args: Iterable[Any] = (),
        timeout: int = DEFAULT_TIMEOUT,
    ) -> list[Any]:
        """Call a method and return the reply's values; errors raise :class:`DBusError`."""
        serial = next(self._serials)
        fields = [
            (_FIELD_PATH, Variant("o", path)),
            (_FIELD_MEMBER, Variant("s", method)),
            (_FIELD_DESTINATION, Variant("s", destination)),
        ]
        if interface:
            fields.append((_FIELD_INTERFACE, Variant("s", interface)))
        if signature:
            fields.append((_FIELD_SIGNATURE, Variant("g", signature)))
        body = marshal(signature, args)
        header = marshal(
            _HEADER_SIGNATURE,
            [ord("l"), _METHOD_CALL, 0, 1, len(body), serial, fields],
        )
        header += b"\0" * (-len(header) % 8)
        try:
            self._sock.sendall(header + body)
        except OSError as exc:
            raise DBusError("org.freedesktop.DBus.Error.Disconnected", str(exc)) from exc

        deadline = time.monotonic() + timeout / 1000.0
        while True:
            kind, reply_fields, reply_body = self._read_message(deadline)
            if reply_fields.get(_FIELD_REPLY_SERIAL) != serial:
                continue
            if kind == _METHOD_RETURN:
                return reply_body
            if kind == _ERROR:
                text = reply_body[0] if reply_body and isinstance(reply_body[0], str) else ""
                raise DBusError(str(reply_fields.get(_FIELD_ERROR_NAME, "")), text)

    def close(self) -> None:
        """Close the underlying socket."""
        self._sock.close()

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()


def connect_session(environ: Mapping[str, str] | None = None) -> Connection:
    """Open a private, authenticated connection to the session bus."""
    address = session_bus_address(environ)
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.connect(address)
    except OSError as exc:
        sock.close()
        raise DBusError("org.freedesktop.DBus.Error.NoServer", str(exc)) from exc
    conn = Connection(sock)
    try:
        conn._authenticate()
        conn.call(
            "org.freedesktop.DBus",
            "/org/freedesktop/DBus",
            "org.freedesktop.DBus",
            "Hello",
            timeout=5000,
        )
    except BaseException:
        conn.close()
        raise
    return conn