import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from x3270script.exceptions import TransportEOFError
from x3270script.protocol.channel import ScriptChannel

STATUS = "U F U C(host) I 4 24 80 0 0 0x0 -"


def make_channel():
    reader = asyncio.StreamReader()
    writer = MagicMock()
    writer.drain = AsyncMock()
    writer.wait_closed = AsyncMock()
    return reader, writer, ScriptChannel(reader, writer)


def feed_reply(reader, *lines):
    reader.feed_data("".join(f"{line}\n" for line in lines).encode("utf-8"))


@pytest.mark.asyncio
async def test_exchange_reads_one_reply():
    reader, writer, channel = make_channel()
    feed_reply(reader, "data: hello", STATUS, "ok")
    lines = await channel.exchange("Ascii()")
    assert lines == ["data: hello", STATUS, "ok"]
    writer.write.assert_called_once_with(b"Ascii()\n")
    assert channel.owed_replies == 0


@pytest.mark.asyncio
async def test_error_terminates_reply():
    reader, writer, channel = make_channel()
    feed_reply(reader, "data: failed", STATUS, "error")
    assert (await channel.exchange("Fail()"))[-1] == "error"


@pytest.mark.asyncio
async def test_exchange_uses_encoding():
    reader, writer, channel = make_channel()
    feed_reply(reader, STATUS, "ok")
    await channel.exchange("String(é)", "latin-1")
    writer.write.assert_called_once_with("String(é)\n".encode("latin-1"))


@pytest.mark.asyncio
async def test_end_of_stream_raises():
    reader, writer, channel = make_channel()
    reader.feed_data(b"data: partial\n")
    reader.feed_eof()
    with pytest.raises(TransportEOFError):
        await channel.exchange("Ascii()")


@pytest.mark.asyncio
async def test_abandoned_reply_is_discarded():
    reader, writer, channel = make_channel()
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(channel.exchange("Wait(Output)"), 0.05)
    assert channel.owed_replies == 1

    feed_reply(reader, "data: late", STATUS, "ok")
    feed_reply(reader, "data: fresh", STATUS, "ok")
    lines = await channel.exchange("Ascii()")
    assert lines[0] == "data: fresh"
    assert channel.owed_replies == 0


@pytest.mark.asyncio
async def test_close_is_idempotent():
    reader, writer, channel = make_channel()
    await channel.close()
    await channel.close()
    writer.close.assert_called_once()
