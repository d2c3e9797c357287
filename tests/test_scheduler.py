from pathlib import Path

import pytest
from PIL import Image

from pdftoimg.errors import ConfigError, RenderError
from pdftoimg.pipeline.scheduler import convert, iter_chunks, process_chunk, resolve_page_range
from pdftoimg.pipeline.schemas import Chunk, ConversionRequest, PageRange


class FakeRenderer:
    def __init__(self, events, total_pages, fail_on=None):
        self.events = events
        self.total_pages = total_pages
        self.fail_on = fail_on

    def __enter__(self):
        self.events.append("open")
        return self

    def __exit__(self, *exc_info):
        self.close()

    def page_count(self):
        return self.total_pages

    def render_page(self, index):
        if index == self.fail_on:
            raise RenderError(f"boom on {index}")
        self.events.append(index)
        return Image.new("RGB", (4, 4), (255, 255, 255))

    def close(self):
        self.events.append("close")


def _factory(events, total_pages, fail_on=None):
    return lambda _path: FakeRenderer(events, total_pages, fail_on=fail_on)


def _fake_encoder(image, path: Path):
    path.write_bytes(b"jpeg")


class RecordingReporter:
    def __init__(self):
        self.calls = []

    def __call__(self, current, total):
        self.calls.append((current, total))


@pytest.mark.parametrize(
    "start_flag,end_flag,total,expected",
    [
        (0, -1, 7, (0, 7)),
        (3, -1, 7, (0, 7)),
        (3, 5, 7, (2, 5)),
        (1, 1, 7, (0, 1)),
        (2, 50, 7, (1, 7)),
        (6, 4, 7, (0, 4)),
        (0, 0, 7, (0, 0)),
        (9, 12, 7, (7, 7)),
        (0, -1, 0, (0, 0)),
        (-3, 4, 7, (0, 4)),
    ],
)
def test_resolve_page_range(start_flag, end_flag, total, expected):
    page_range = resolve_page_range(start_flag, end_flag, total)
    assert (page_range.start, page_range.end) == expected
    assert 0 <= page_range.start <= page_range.end <= max(total, 0)


def test_end_flag_clamps_to_total():
    assert resolve_page_range(0, -1, 12) == resolve_page_range(0, 99, 12) == PageRange(0, 12)


def test_start_without_end_is_ignored():
    assert resolve_page_range(5, -1, 10).start == 0


def test_iter_chunks_partitions_range():
    chunks = list(iter_chunks(PageRange(0, 7), 3))
    assert chunks == [Chunk(0, 3), Chunk(3, 6), Chunk(6, 7)]


@pytest.mark.parametrize("start,end,size", [(0, 10, 5), (2, 9, 4), (4, 5, 100), (0, 1, 1)])
def test_iter_chunks_cover_exactly(start, end, size):
    chunks = list(iter_chunks(PageRange(start, end), size))
    covered = [n for chunk in chunks for n in chunk.indices()]
    assert covered == list(range(start, end))
    assert all(len(chunk) == size for chunk in chunks[:-1])
    remainder = (end - start) % size
    assert len(chunks[-1]) == (remainder or size)


def test_iter_chunks_stops_at_range_end_not_document_end():
    chunks = list(iter_chunks(PageRange(0, 5), 3))
    assert chunks[-1] == Chunk(3, 5)


def test_iter_chunks_empty_range():
    assert list(iter_chunks(PageRange(3, 3), 10)) == []


def test_iter_chunks_rejects_bad_size():
    with pytest.raises(ConfigError):
        list(iter_chunks(PageRange(0, 3), 0))


def test_process_chunk_reports_every_n_and_at_end(tmp_path):
    events = []
    reporter = RecordingReporter()
    counter = process_chunk(
        Chunk(0, 7),
        FakeRenderer(events, 7),
        tmp_path,
        0,
        7,
        encoder=_fake_encoder,
        reporter=reporter,
        progress_every=5,
    )
    assert counter == 7
    assert reporter.calls == [(5, 7), (7, 7)]


def test_convert_writes_numbered_files_per_chunk(tmp_path):
    out = tmp_path / "out"
    events = []
    reporter = RecordingReporter()
    request = ConversionRequest(source=tmp_path / "doc.pdf", output_dir=out, chunk_size=3, progress_every=1)

    result = convert(request, renderer_factory=_factory(events, 7), encoder=_fake_encoder, reporter=reporter)

    assert sorted(p.name for p in out.iterdir()) == [f"{i:03d}.jpg" for i in range(1, 8)]
    assert result.pages_written == 7
    assert result.chunks == 3
    assert result.page_range == PageRange(0, 7)
    # probe handle first, then one handle per chunk
    assert events == [
        "open", "close",
        "open", 0, 1, 2, "close",
        "open", 3, 4, 5, "close",
        "open", 6, "close",
    ]
    assert [c for c, _ in reporter.calls] == sorted(c for c, _ in reporter.calls)
    assert all(total == 7 for _, total in reporter.calls)
    assert reporter.calls[-1] == (7, 7)


def test_convert_honours_explicit_bounds(tmp_path):
    out = tmp_path / "out"
    request = ConversionRequest(source=tmp_path / "doc.pdf", output_dir=out, start_page=3, end_page=5, chunk_size=2)

    result = convert(request, renderer_factory=_factory([], 10), encoder=_fake_encoder, reporter=RecordingReporter())

    assert sorted(p.name for p in out.iterdir()) == ["003.jpg", "004.jpg", "005.jpg"]
    assert result.pages_written == 3


def test_convert_clears_existing_output(tmp_path):
    out = tmp_path / "out"
    (out / "nested").mkdir(parents=True)
    (out / "nested" / "deep.txt").write_text("x")
    (out / "stale.jpg").write_bytes(b"old")

    request = ConversionRequest(source=tmp_path / "doc.pdf", output_dir=out)
    convert(request, renderer_factory=_factory([], 2), encoder=_fake_encoder, reporter=RecordingReporter())

    assert sorted(p.name for p in out.iterdir()) == ["001.jpg", "002.jpg"]


def test_convert_append_keeps_existing_output(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    (out / "keep.txt").write_text("x")

    request = ConversionRequest(source=tmp_path / "doc.pdf", output_dir=out, append=True)
    convert(request, renderer_factory=_factory([], 1), encoder=_fake_encoder, reporter=RecordingReporter())

    assert sorted(p.name for p in out.iterdir()) == ["001.jpg", "keep.txt"]


def test_convert_empty_document(tmp_path):
    out = tmp_path / "out"
    events = []
    reporter = RecordingReporter()
    request = ConversionRequest(source=tmp_path / "doc.pdf", output_dir=out)

    result = convert(request, renderer_factory=_factory(events, 0), encoder=_fake_encoder, reporter=reporter)

    assert result.pages_written == 0
    assert result.chunks == 0
    assert list(out.iterdir()) == []
    assert reporter.calls == []
    assert events == ["open", "close"]


def test_convert_closes_renderer_on_failure(tmp_path):
    out = tmp_path / "out"
    events = []
    request = ConversionRequest(source=tmp_path / "doc.pdf", output_dir=out, chunk_size=3)

    with pytest.raises(RenderError):
        convert(request, renderer_factory=_factory(events, 7, fail_on=4), encoder=_fake_encoder, reporter=RecordingReporter())

    assert events == ["open", "close", "open", 0, 1, 2, "close", "open", 3, "close"]
    # no rollback of pages already written
    assert sorted(p.name for p in out.iterdir()) == ["001.jpg", "002.jpg", "003.jpg", "004.jpg"]


def test_request_rejects_non_positive_chunk_size(tmp_path):
    with pytest.raises(ConfigError):
        ConversionRequest(source=tmp_path / "doc.pdf", chunk_size=0)


def test_convert_passes_dpi_to_default_renderer(monkeypatch, tmp_path):
    created = []

    def fake_pdf_renderer(path, *, dpi):
        created.append((path, dpi))
        return FakeRenderer([], 2)

    monkeypatch.setattr("pdftoimg.pipeline.scheduler.PdfRenderer", fake_pdf_renderer)
    source = tmp_path / "doc.pdf"
    request = ConversionRequest(source=source, output_dir=tmp_path / "out", dpi=150, chunk_size=1)

    convert(request, encoder=_fake_encoder, reporter=RecordingReporter())

    # probe handle plus one per chunk
    assert created == [(source, 150)] * 3
