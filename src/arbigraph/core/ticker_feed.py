"""WebSocket client for the all-market ticker stream."""
import json
import asyncio
from contextlib import aclosing
from typing import AsyncIterator, List, Optional, Union
import aiohttp
from loguru import logger
from arbigraph.models import Tick
from arbigraph.config import FeedConfig
from arbigraph.infrastructure.error_handling import (
    FeedDecodeError, async_retry_with_backoff
)

_CONNECT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)


class TickerFeed:
    """Turns each frame of the ``!ticker@arr`` stream into one tick batch."""

    def __init__(self, config: FeedConfig, session: Optional[aiohttp.ClientSession] = None):
        """Initialise the feed; a session is created on first connect if none is given."""
        self.config = config
        self._session = session
        self._owns_session = session is None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self.running = False
        self.frames_received = 0
        self.decode_errors = 0

    @staticmethod
    def decode(payload: Union[str, bytes]) -> List[Tick]:
        """Decode one frame into ticks.

        The stream sends a JSON array of ticker objects; ``s`` is the pair
        symbol and ``c`` the last price. Combined-stream envelopes
        (``{"stream": ..., "data": ...}``) and single objects are accepted
        too. Missing fields are passed on as empty strings so that the
        processor counts them as invalid ticks.
        """
        if isinstance(payload, (bytes, bytearray)):
            try:
                payload = payload.decode("utf-8")
            except UnicodeDecodeError as e:
                raise FeedDecodeError(f"Frame is not UTF-8: {e}") from e

        try:
            data = json.loads(payload)
        except (TypeError, ValueError) as e:
            raise FeedDecodeError(f"Invalid JSON frame: {str(payload)[:100]}") from e

        if isinstance(data, dict) and "data" in data:
            data = data["data"]
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            raise FeedDecodeError(f"Unexpected frame type: {type(data).__name__}")

        ticks = []
        for entry in data:
            if not isinstance(entry, dict):
                raise FeedDecodeError(f"Unexpected ticker entry: {entry!r}")
            symbol = entry.get("s")
            price = entry.get("c")
            ticks.append(Tick(
                symbol="" if symbol is None else str(symbol),
                last_price="" if price is None else str(price),
            ))
        return ticks

    async def _connect(self) -> aiohttp.ClientWebSocketResponse:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True

        logger.info(f"Connecting to {self.config.url}")
        return await self._session.ws_connect(
            self.config.url, heartbeat=self.config.heartbeat
        )

    async def _frames(self, ws) -> AsyncIterator[List[Tick]]:
        async for msg in ws:
            if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                self.frames_received += 1
                try:
                    yield self.decode(msg.data)
                except FeedDecodeError as e:
                    self.decode_errors += 1
                    logger.warning(f"Dropping undecodable frame: {e}")
            elif msg.type == aiohttp.WSMsgType.ERROR:
                logger.error(f"WebSocket error: {ws.exception()}")
                break

    async def batches(self) -> AsyncIterator[List[Tick]]:
        """Yield tick batches, reconnecting with backoff when the stream drops."""
        connect = async_retry_with_backoff(
            max_retries=self.config.max_reconnects,
            initial_delay=self.config.reconnect_delay,
            max_delay=self.config.max_reconnect_delay,
            exceptions=_CONNECT_ERRORS,
        )(self._connect)

        self.running = True
        try:
            while self.running:
                self._ws = await connect()
                logger.success(f"Connected to {self.config.url}")

                try:
                    async with aclosing(self._frames(self._ws)) as frames:
                        async for batch in frames:
                            yield batch
                            if not self.running:
                                break
                finally:
                    await self._close_ws()

                if self.running:
                    logger.warning(
                        f"Stream closed, reconnecting in {self.config.reconnect_delay}s"
                    )
                    await asyncio.sleep(self.config.reconnect_delay)
        finally:
            await self.close()

    def stop(self):
        """Stop after the batch currently being handed out."""
        self.running = False

    async def close(self):
        """Close the socket and any session this feed created."""
        self.running = False
        await self._close_ws()
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        logger.info("Ticker feed closed")

    async def _close_ws(self):
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        self._ws = None
