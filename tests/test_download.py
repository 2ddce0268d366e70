"""Streaming download engine."""

import pytest
import requests

from clumsy_loader.core.download import download_backup, stream_to_file
from clumsy_loader.core.errors import DownloadIOError, DownloadRejected, TransportError
from clumsy_loader.core.utils import backup_filename


class TestStreamToFile:
    def test_three_chunks_make_500_bytes(self, tmp_path):
        out = tmp_path / "b.tar.gz"
        seen = []

        result = stream_to_file(
            iter([b"a" * 100, b"b" * 250, b"c" * 150]), out, 500,
            on_progress=lambda done, total: seen.append((done, total)),
        )

        assert out.stat().st_size == 500
        assert out.read_bytes() == b"a" * 100 + b"b" * 250 + b"c" * 150
        assert seen == [(100, 500), (350, 500), (500, 500)]
        assert result.size == 500
        assert result.complete

    def test_size_mismatch_is_reported_not_raised(self, tmp_path):
        result = stream_to_file([b"x" * 10], tmp_path / "b.tar.gz", 500)

        assert result.size == 10
        assert result.expected == 500
        assert not result.complete

    def test_keepalive_chunks_skipped(self, tmp_path):
        seen = []

        stream_to_file([b"ab", b"", b"cd"], tmp_path / "b", 4,
                       on_progress=lambda d, t: seen.append(d))

        assert seen == [2, 4]

    def test_empty_stream_creates_empty_file(self, tmp_path):
        out = tmp_path / "b"

        result = stream_to_file([], out, 0)

        assert out.exists()
        assert result.size == 0

    def test_truncates_existing_file(self, tmp_path):
        out = tmp_path / "b"
        out.write_bytes(b"old content that is longer")

        stream_to_file([b"new"], out, 3)

        assert out.read_bytes() == b"new"

    def test_stream_failure_leaves_partial_file(self, tmp_path):
        out = tmp_path / "b"

        def chunks():
            yield b"x" * 64
            raise requests.exceptions.ChunkedEncodingError("connection reset")

        with pytest.raises(TransportError, match="after 64 bytes"):
            stream_to_file(chunks(), out, 1000)
        assert out.read_bytes() == b"x" * 64

    def test_unwritable_destination(self, tmp_path):
        with pytest.raises(DownloadIOError):
            stream_to_file([b"x"], tmp_path / "missing-dir" / "b", 1)


class TestDownloadBackup:
    def test_html_response_is_rejected_without_file(self, tmp_path, session, make_response):
        out = tmp_path / backup_filename("b-1")
        session.get.return_value = make_response("rate limited", content_type="text/html")

        with pytest.raises(DownloadRejected) as ei:
            download_backup("https://node/dl", out, 500, session=session)

        assert ei.value.message == "rate limited"
        assert str(ei.value) == "rate limited"
        assert not out.exists()

    def test_html_with_charset_is_rejected(self, tmp_path, session, make_response):
        session.get.return_value = make_response("nope", content_type="text/html; charset=utf-8")

        with pytest.raises(DownloadRejected):
            download_backup("https://node/dl", tmp_path / "b", 1, session=session)

    def test_binary_response_streams_to_disk(self, tmp_path, session, make_response):
        out = tmp_path / backup_filename("b-1")
        resp = make_response(
            content_type="application/octet-stream",
            chunks=[b"1" * 100, b"2" * 250, b"3" * 150],
        )
        session.get.return_value = resp
        seen = []

        result = download_backup("https://node/dl?token=t", out, 500, session=session,
                                 on_progress=lambda d, t: seen.append((d, t)))

        assert out.stat().st_size == 500
        assert seen[-1] == (500, 500)
        assert result.path == out
        assert resp.closed

    def test_signed_link_fetched_without_extra_headers(self, tmp_path, session, make_response):
        session.get.return_value = make_response(b"data", content_type="application/gzip")

        download_backup("https://node/dl?token=t", tmp_path / "b", 4, session=session)

        args, kwargs = session.get.call_args
        assert args == ("https://node/dl?token=t",)
        assert "headers" not in kwargs
        assert kwargs["stream"] is True

    def test_missing_content_type_treated_as_binary(self, tmp_path, session, make_response):
        session.get.return_value = make_response(b"data", content_type=None)

        result = download_backup("https://node/dl", tmp_path / "b", 4, session=session)

        assert result.size == 4

    def test_request_failure(self, tmp_path, session):
        session.get.side_effect = requests.ConnectionError("dns")

        with pytest.raises(TransportError):
            download_backup("https://node/dl", tmp_path / "b", 1, session=session)
        assert not (tmp_path / "b").exists()

    def test_http_error_without_html(self, tmp_path, session, make_response):
        session.get.return_value = make_response(b"", status_code=403,
                                                 content_type="application/xml")

        with pytest.raises(TransportError):
            download_backup("https://node/dl", tmp_path / "b", 1, session=session)
        assert not (tmp_path / "b").exists()


class TestFileNaming:
    def test_uuid_name(self):
        assert backup_filename("0b6c1f8e-1d2a-4c55-9bd7-3f5e2b1a0c9d") == (
            "0b6c1f8e-1d2a-4c55-9bd7-3f5e2b1a0c9d.tar.gz"
        )

    @pytest.mark.parametrize("uuid", ["../../etc/passwd", "..", "a\\b", ""])
    def test_no_path_traversal(self, uuid):
        name = backup_filename(uuid)
        assert "/" not in name and "\\" not in name
        assert not name.startswith(".")
        assert name.endswith(".tar.gz")
