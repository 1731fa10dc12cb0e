"""Asynchronous HTTP/1.x server: listener, per-connection sessions and messages."""

from __future__ import annotations

import asyncio
import inspect
import sys
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Awaitable, Callable, Optional, Union

READ_TIMEOUT = 30.0
_MAX_HEADER_BYTES = 8 * 1024
_MAX_BODY_BYTES = 1024 * 1024
_HEAD_END = b"\r\n\r\n"
_CRLF = b"\r\n"

Endpoint = Any
Send = Callable[["HttpResponse"], None]
Handler = Callable[[Endpoint, "HttpRequest", Send], Optional[Awaitable[None]]]


class _ProtocolError(Exception):
    """The peer sent something that is not a valid HTTP request."""


def report_error(error: BaseException, what: str) -> None:
    """Print a failed operation and its cause to standard error."""
    message = str(error) or type(error).__name__
    print(f"{what}: {message}", file=sys.stderr, flush=True)


def _connection_tokens(headers: dict[str, str]) -> set[str]:
    return {token.strip().lower() for token in headers.get("connection", "").split(",") if token.strip()}


@dataclass
class HttpRequest:
    """A parsed request; header names are stored in lower case."""

    method: str
    target: str
    version: str = "HTTP/1.1"
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    @property
    def keep_alive(self) -> bool:
        tokens = _connection_tokens(self.headers)
        if self.version == "HTTP/1.0":
            return "keep-alive" in tokens
        return "close" not in tokens

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass
class HttpResponse:
    """A response to be written back to the client."""

    status: int = 200
    body: Union[bytes, str] = b""
    headers: dict[str, str] = field(default_factory=dict)
    version: str = "HTTP/1.1"
    keep_alive: bool = True
    reason: Optional[str] = None

    @property
    def need_eof(self) -> bool:
        """True if the connection must be closed after this response."""
        if not self.keep_alive:
            return True
        lowered = {name.lower(): value for name, value in self.headers.items()}
        return "close" in _connection_tokens(lowered)

    def to_bytes(self) -> bytes:
        body = self.body.encode("utf-8") if isinstance(self.body, str) else bytes(self.body)
        reason = self.reason
        if reason is None:
            try:
                reason = HTTPStatus(self.status).phrase
            except ValueError:
                reason = ""
        lines = [f"{self.version} {self.status} {reason}"]
        present = {name.lower() for name in self.headers}
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        if "content-length" not in present:
            lines.append(f"Content-Length: {len(body)}")
        if "connection" not in present:
            if not self.keep_alive:
                lines.append("Connection: close")
            elif self.version == "HTTP/1.0":
                lines.append("Connection: keep-alive")
        head = "\r\n".join(lines).encode("latin-1") + _HEAD_END
        return head + body


async def _read_chunked(reader: asyncio.StreamReader) -> bytes:
    chunks = []
    total = 0
    while True:
        line = await reader.readuntil(_CRLF)
        try:
            size = int(line.split(b";", 1)[0].strip(), 16)
        except ValueError:
            raise _ProtocolError("bad chunk size") from None
        if size < 0:
            raise _ProtocolError("bad chunk size")
        if size == 0:
            while await reader.readuntil(_CRLF) != _CRLF:
                pass
            return b"".join(chunks)
        total += size
        if total > _MAX_BODY_BYTES:
            raise _ProtocolError("body limit exceeded")
        chunks.append(await reader.readexactly(size))
        if await reader.readexactly(2) != _CRLF:
            raise _ProtocolError("bad chunk terminator")


async def _read_request(reader: asyncio.StreamReader) -> Optional[HttpRequest]:
    """Read one request; None means the peer closed the connection cleanly."""
    try:
        head = await reader.readuntil(_HEAD_END)
    except asyncio.IncompleteReadError as exc:
        if not exc.partial:
            return None
        raise _ProtocolError("partial message") from None
    except asyncio.LimitOverrunError:
        raise _ProtocolError("header limit exceeded") from None
    if len(head) > _MAX_HEADER_BYTES:
        raise _ProtocolError("header limit exceeded")

    request_line, *header_lines = head[: -len(_HEAD_END)].decode("latin-1").split("\r\n")
    parts = request_line.split(" ")
    if len(parts) != 3 or not all(parts) or not parts[2].startswith("HTTP/1."):
        raise _ProtocolError("bad request line")
    method, target, version = parts

    headers: dict[str, str] = {}
    for line in header_lines:
        name, sep, value = line.partition(":")
        name = name.strip().lower()
        if not sep or not name:
            raise _ProtocolError("bad header")
        value = value.strip()
        headers[name] = f"{headers[name]}, {value}" if name in headers else value

    try:
        if "chunked" in headers.get("transfer-encoding", "").lower():
            body = await _read_chunked(reader)
        elif "content-length" in headers:
            try:
                length = int(headers["content-length"])
            except ValueError:
                raise _ProtocolError("bad Content-Length") from None
            if length < 0:
                raise _ProtocolError("bad Content-Length")
            if length > _MAX_BODY_BYTES:
                raise _ProtocolError("body limit exceeded")
            body = await reader.readexactly(length)
        else:
            body = b""
    except asyncio.IncompleteReadError:
        raise _ProtocolError("partial message") from None
    except asyncio.LimitOverrunError:
        raise _ProtocolError("chunk header limit exceeded") from None

    return HttpRequest(method, target, version, headers, body)


class Session:
    """Serves the requests of one client connection, one after another."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        handler: Handler,
        *,
        read_timeout: float = READ_TIMEOUT,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._handler = handler
        self._read_timeout = read_timeout

    @property
    def endpoint(self) -> Endpoint:
        return self._writer.get_extra_info("peername")

    async def run(self) -> None:
        """Read, handle and answer requests until the connection ends."""
        try:
            while True:
                try:
                    request = await asyncio.wait_for(
                        _read_request(self._reader), self._read_timeout
                    )
                except asyncio.TimeoutError:
                    report_error(TimeoutError("read timed out"), "read")
                    return
                except (_ProtocolError, ConnectionError) as exc:
                    report_error(exc, "read")
                    return
                if request is None:
                    await self._close()
                    return

                try:
                    response = await self._handle(request)
                except Exception as exc:  # the handler's failure ends this session only
                    report_error(exc, "handle")
                    return

                try:
                    self._writer.write(response.to_bytes())
                    await self._writer.drain()
                except ConnectionError as exc:
                    report_error(exc, "write")
                    return

                if response.need_eof:
                    await self._close()
                    return
        finally:
            if not self._writer.is_closing():
                self._writer.close()

    async def _handle(self, request: HttpRequest) -> HttpResponse:
        future: asyncio.Future[HttpResponse] = asyncio.get_running_loop().create_future()

        def send(response: HttpResponse) -> None:
            if not future.done():
                future.set_result(response)

        result = self._handler(self.endpoint, request, send)
        if inspect.isawaitable(result):
            await result
        return await future

    async def _close(self) -> None:
        try:
            if self._writer.can_write_eof():
                self._writer.write_eof()
                await self._writer.drain()
        except ConnectionError:
            pass


class Listener:
    """Accepts connections on an address and starts a session for each."""

    def __init__(
        self,
        host: Optional[str],
        port: int,
        handler: Handler,
        *,
        read_timeout: float = READ_TIMEOUT,
    ) -> None:
        self._host = host
        self._port = port
        self._handler = handler
        self._read_timeout = read_timeout
        self._server: Optional[asyncio.AbstractServer] = None

    async def run(self) -> None:
        """Bind, listen and begin accepting connections."""
        if self._server is not None:
            raise RuntimeError("Listener is already running")
        self._server = await asyncio.start_server(
            self._on_accept, self._host, self._port, reuse_address=True
        )

    def close(self) -> None:
        """Stop accepting new connections."""
        if self._server is not None:
            self._server.close()

    async def wait_closed(self) -> None:
        if self._server is not None:
            await self._server.wait_closed()

    @property
    def address(self) -> tuple:
        if self._server is None or not self._server.sockets:
            raise RuntimeError("Listener is not running")
        return self._server.sockets[0].getsockname()

    @property
    def port(self) -> int:
        return self.address[1]

    async def __aenter__(self) -> "Listener":
        if self._server is None:
            await self.run()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()
        await self.wait_closed()

    async def _on_accept(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        await Session(reader, writer, self._handler, read_timeout=self._read_timeout).run()


async def serve_http(host: Optional[str], port: int, handler: Handler) -> Listener:
    """Start serving HTTP on host:port and return the running listener."""
    listener = Listener(host, port, handler)
    await listener.run()
    return listener