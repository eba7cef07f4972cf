"""Tests for the decoder adapter and the encoders."""

from io import BytesIO

import pytest
from PIL import Image, ImageCms

from conftest import NonSeekableStream, image_bytes, make_image
from src.lightresize.decoding import decode_bytes, decode_image
from src.lightresize.encoding import encode, save_jpeg, save_png
from src.lightresize.errors import DecodeError, ValidationError
from src.lightresize.instructions import Instructions


def _srgb_icc() -> bytes:
    return ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()


class TestDecoding:
    def test_decodes_png(self) -> None:
        with decode_bytes(image_bytes(30, 20)) as image:
            assert image.size == (30, 20)

    def test_reads_from_start_of_seekable_stream(self) -> None:
        stream = BytesIO(image_bytes(30, 20))
        stream.seek(17)
        with decode_image(stream) as image:
            assert image.size == (30, 20)
        assert not stream.closed

    def test_non_seekable_stream(self) -> None:
        with decode_image(NonSeekableStream(image_bytes(8, 9))) as image:
            assert image.size == (8, 9)

    @pytest.mark.parametrize("data", [b"not an image at all", b""])
    def test_malformed_input_raises_decode_error(self, data) -> None:
        with pytest.raises(DecodeError):
            decode_bytes(data)

    def test_decode_error_is_an_os_error(self) -> None:
        with pytest.raises(OSError):
            decode_image(BytesIO(b"\x89PNG\r\n\x1a\n truncated"))

    def test_ignore_icc_drops_profile(self) -> None:
        buffer = BytesIO()
        make_image(10, 10).save(buffer, format="PNG", icc_profile=_srgb_icc())
        with decode_bytes(buffer.getvalue(), ignore_icc=True) as image:
            assert "icc_profile" not in image.info
            assert image.size == (10, 10)

    def test_icc_profile_is_applied(self) -> None:
        buffer = BytesIO()
        make_image(10, 10).save(buffer, format="PNG", icc_profile=_srgb_icc())
        with decode_bytes(buffer.getvalue()) as image:
            assert "icc_profile" not in image.info
            assert image.mode == "RGB"
            assert image.size == (10, 10)

    def test_unusable_icc_profile_raises_decode_error(self) -> None:
        buffer = BytesIO()
        make_image(10, 10).save(buffer, format="PNG", icc_profile=b"not an icc profile")
        with pytest.raises(DecodeError):
            decode_bytes(buffer.getvalue())

    def test_unusable_icc_profile_can_be_ignored(self) -> None:
        buffer = BytesIO()
        make_image(10, 10).save(buffer, format="PNG", icc_profile=b"not an icc profile")
        with decode_bytes(buffer.getvalue(), ignore_icc=True) as image:
            assert image.size == (10, 10)


class TestEncoding:
    def test_png_round_trip_is_lossless(self) -> None:
        original = make_image(17, 11, "RGBA")
        buffer = BytesIO()
        save_png(original, buffer)
        with decode_bytes(buffer.getvalue()) as decoded:
            assert decoded.mode == "RGBA"
            assert decoded.tobytes() == original.tobytes()

    @pytest.mark.parametrize("quality", [0, 1, 90, 100])
    def test_jpeg_round_trip_keeps_dimensions(self, quality) -> None:
        original = make_image(17, 11, "RGBA")
        buffer = BytesIO()
        save_jpeg(original, buffer, quality)
        with decode_bytes(buffer.getvalue()) as decoded:
            assert decoded.format == "JPEG"
            assert decoded.size == (17, 11)

    @pytest.mark.parametrize("quality", [-1, 101, 250, 90.0, True])
    def test_jpeg_rejects_invalid_quality(self, quality) -> None:
        buffer = BytesIO()
        with pytest.raises(ValidationError):
            save_jpeg(make_image(4, 4), buffer, quality)
        assert buffer.getvalue() == b""

    def test_png_to_non_seekable_sink_is_buffered(self) -> None:
        sink = NonSeekableStream()
        save_png(make_image(5, 5), sink)
        assert bytes(sink.written).startswith(b"\x89PNG\r\n\x1a\n")
        with decode_bytes(bytes(sink.written)) as decoded:
            assert decoded.size == (5, 5)

    @pytest.mark.parametrize("fmt, expected", [("png", "PNG"), ("jpeg", "JPEG")])
    def test_encode_dispatches_on_format(self, fmt, expected) -> None:
        buffer = BytesIO()
        encode(make_image(6, 4, "RGBA"), buffer, Instructions(format=fmt))
        with Image.open(BytesIO(buffer.getvalue())) as decoded:
            assert decoded.format == expected
