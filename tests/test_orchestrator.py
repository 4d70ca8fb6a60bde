import io
from collections import Counter
from unittest.mock import AsyncMock, MagicMock

import pytest

from ptrsweep.errors import CIDRParseError
from ptrsweep.orchestrator import (
    enqueue_block,
    open_input,
    prepare_stdin,
    read_lines,
    run_sweep,
)


@pytest.mark.asyncio
async def test_read_lines_yields_until_eof():
    stream = io.StringIO("10.0.0.0/30\n192.0.2.0/24\n")
    lines = [line async for line in read_lines(stream)]
    assert lines == ["10.0.0.0/30\n", "192.0.2.0/24\n"]


@pytest.mark.asyncio
async def test_enqueue_block_submits_every_host():
    pool = MagicMock()
    pool.submit = AsyncMock()

    count = await enqueue_block(pool, "10.0.0.0/29")

    assert count == 6
    submitted = [c.args[0] for c in pool.submit.await_args_list]
    assert submitted == [f"10.0.0.{i}" for i in range(1, 7)]


@pytest.mark.asyncio
async def test_enqueue_block_malformed_submits_nothing():
    pool = MagicMock()
    pool.submit = AsyncMock()

    with pytest.raises(CIDRParseError):
        await enqueue_block(pool, "not-a-cidr")
    pool.submit.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_sweep_end_to_end(fake_lookup, lookup_calls, capsys):
    stream = io.StringIO("192.0.2.0/30\nnot-a-cidr\n\n10.0.0.0/31\n2001:db8::/126\n")
    out = io.StringIO()

    summary = await run_sweep(stream, fake_lookup, workers=3, output_stream=out)

    assert summary == {"blocks": 3, "invalid_blocks": 1, "addresses": 4}
    assert Counter(lookup_calls) == Counter(
        ["192.0.2.1", "192.0.2.2", "2001:db8::1", "2001:db8::2"]
    )
    assert sorted(out.getvalue().splitlines()) == [
        "192.0.2.1\tgw.example.com",
        "192.0.2.2\tweb.example.com",
        "192.0.2.2\twww.example.com",
    ]
    err = capsys.readouterr().err
    assert "Error parsing CIDR not-a-cidr" in err
    assert "not-a-cidr" not in out.getvalue()


@pytest.mark.asyncio
async def test_run_sweep_domain_only(fake_lookup):
    out = io.StringIO()
    await run_sweep(io.StringIO("192.0.2.0/30\n"), fake_lookup, domain_only=True, output_stream=out)
    assert sorted(out.getvalue().splitlines()) == [
        "gw.example.com",
        "web.example.com",
        "www.example.com",
    ]


@pytest.mark.asyncio
async def test_run_sweep_overlapping_blocks_are_processed_independently(fake_lookup, lookup_calls):
    stream = io.StringIO("192.0.2.0/30\n192.0.2.0/29\n")
    summary = await run_sweep(stream, fake_lookup, workers=2, output_stream=io.StringIO())

    assert summary["addresses"] == 8
    assert Counter(lookup_calls)["192.0.2.1"] == 2
    assert Counter(lookup_calls)["192.0.2.6"] == 1


@pytest.mark.asyncio
async def test_run_sweep_only_bad_input(fake_lookup, lookup_calls, capsys):
    stream = io.StringIO("bogus\n10.0.0.0/99\n")
    summary = await run_sweep(stream, fake_lookup, output_stream=io.StringIO())

    assert summary == {"blocks": 0, "invalid_blocks": 2, "addresses": 0}
    assert lookup_calls == []
    err_lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
    assert len(err_lines) == 2


@pytest.mark.asyncio
async def test_undecodable_stdin_line_is_reported_and_skipped(fake_lookup, lookup_calls, capsys):
    stream = prepare_stdin(
        io.TextIOWrapper(io.BytesIO(b"10.0.0.\xff/30\n192.0.2.0/30\n"), encoding="utf-8")
    )
    out = io.StringIO()

    summary = await run_sweep(stream, fake_lookup, workers=2, output_stream=out)

    assert summary == {"blocks": 1, "invalid_blocks": 1, "addresses": 2}
    assert sorted(lookup_calls) == ["192.0.2.1", "192.0.2.2"]
    assert "Error parsing CIDR 10.0.0." in capsys.readouterr().err
    assert "192.0.2.1\tgw.example.com" in out.getvalue()


@pytest.mark.asyncio
async def test_undecodable_input_file_line_is_reported_and_skipped(fake_lookup, lookup_calls, tmp_path, capsys):
    input_file = tmp_path / "subnets.txt"
    input_file.write_bytes(b"\xfe\xff garbage\n192.0.2.0/30\n")

    with open_input(str(input_file)) as stream:
        summary = await run_sweep(stream, fake_lookup, output_stream=io.StringIO())

    assert summary["invalid_blocks"] == 1
    assert summary["addresses"] == 2
    assert sorted(lookup_calls) == ["192.0.2.1", "192.0.2.2"]
    assert "Error parsing CIDR" in capsys.readouterr().err


def test_prepare_stdin_leaves_other_streams_alone():
    stream = io.StringIO("10.0.0.0/30\n")
    assert prepare_stdin(stream) is stream
