"""
Tests for the request validator (ThumbnailService).

Every failure must come back as success=False with a message, never as an
exception.
"""

from io import BytesIO

from PIL import Image

from models.enums import SourceKind
from thumbnail.pipeline import PipelineContext
from thumbnail.service import ThumbnailService


def test_generate_image_thumbnail_end_to_end(service, jpeg_100):
    response = service.generate_image_thumbnail(jpeg_100, "image/jpeg", width=20, height=0)

    assert response.success is True
    assert response.error_message == ""
    assert (response.width, response.height) == (20, 20)
    assert response.size_bytes > 0
    assert response.mime_type == "image/jpeg"
    assert response.encoded_payload.startswith("/9j/")


def test_empty_image_payload(service):
    response = service.generate_image_thumbnail(b"", "image/jpeg")
    assert response.success is False
    assert response.error_message == "image data is required"


def test_oversized_image_cites_limit(service, test_settings):
    response = service.generate_image_thumbnail(b"\x00" * (test_settings.MAX_IMAGE_SIZE + 1))
    assert response.success is False
    assert str(test_settings.MAX_IMAGE_SIZE) in response.error_message
    assert "exceeds maximum allowed size" in response.error_message


def test_undecodable_image_is_business_failure(service):
    response = service.generate_image_thumbnail(b"\x89PNG not really", "image/png")
    assert response.success is False
    assert "failed to decode PNG image" in response.error_message


def test_defaults_applied(service):
    request = service.build_request(width=0, height=-5, quality=0, timestamp="")
    assert request.width == 20
    assert request.height == 0
    assert request.quality == 40
    assert request.timestamp == "00:00:01.000"


def test_quality_out_of_range_replaced(service):
    assert service.build_request(quality=101).quality == 40
    assert service.build_request(quality=-1).quality == 40
    assert service.build_request(quality=1).quality == 1
    assert service.build_request(quality=100).quality == 100


def test_explicit_values_kept(service):
    request = service.build_request(
        width=64, height=48, quality=80, blur=False,
        source_kind=SourceKind.VIDEO, timestamp="00:00:05.000",
    )
    assert (request.width, request.height, request.quality) == (64, 48, 80)
    assert request.blur is False
    assert request.timestamp == "00:00:05.000"


def test_generate_video_thumbnail(service, frame_extractor):
    response = service.generate_video_thumbnail(b"fake mp4", "video/mp4")

    assert response.success is True
    assert (response.width, response.height) == (20, 10)
    # Empty timestamp → configured default
    assert frame_extractor.calls[0][1] == "00:00:01.000"


def test_video_timestamp_passed_through(service, frame_extractor):
    service.generate_video_thumbnail(b"fake mp4", "video/mp4", timestamp="00:01:30.250")
    assert frame_extractor.calls[0][1] == "00:01:30.250"


def test_empty_video_payload(service, frame_extractor):
    response = service.generate_video_thumbnail(b"", "video/mp4")
    assert response.success is False
    assert response.error_message == "video data is required"
    assert frame_extractor.calls == []


def test_video_uses_its_own_larger_limit(service, test_settings):
    """A payload over the image limit but under the video limit is accepted."""
    data = b"\x00" * (test_settings.MAX_IMAGE_SIZE + 1)
    assert service.generate_video_thumbnail(data, "video/mp4").success is True

    too_big = b"\x00" * (test_settings.MAX_VIDEO_SIZE + 1)
    response = service.generate_video_thumbnail(too_big, "video/mp4")
    assert response.success is False
    assert f"video size exceeds maximum allowed size of {test_settings.MAX_VIDEO_SIZE} bytes" == response.error_message


def test_ffmpeg_failure_is_business_failure(test_settings, failing_extractor):
    service = ThumbnailService(test_settings, PipelineContext(frame_extractor=failing_extractor))
    response = service.generate_video_thumbnail(b"broken", "video/mp4")

    assert response.success is False
    assert "moov atom not found" in response.error_message


def test_get_image_dimensions(service, image_factory):
    data = image_factory(size=(640, 480), fmt="PNG")
    response = service.get_image_dimensions(data, "image/png")

    assert response.success is True
    assert (response.width, response.height) == (640, 480)
    assert response.size_bytes == len(data)


def test_get_image_dimensions_empty(service):
    response = service.get_image_dimensions(b"")
    assert response.success is False
    assert response.error_message == "image data is required"


def test_get_image_dimensions_garbage(service):
    response = service.get_image_dimensions(b"GIF89a nope", "")
    assert response.success is False
    assert "GIF" in response.error_message


def test_data_uri_flag(test_settings, extractor_factory, jpeg_100):
    settings = test_settings.model_copy(update={"THUMBNAIL_DATA_URI": True})
    ctx = PipelineContext(frame_extractor=extractor_factory(), data_uri=settings.THUMBNAIL_DATA_URI)
    response = ThumbnailService(settings, ctx).generate_image_thumbnail(jpeg_100)
    assert response.encoded_payload.startswith("data:image/jpeg;base64,")


def test_get_image_dimensions_truncated(service):
    buf = BytesIO()
    Image.linear_gradient("L").convert("RGB").save(buf, format="PNG")
    data = buf.getvalue()[: len(buf.getvalue()) // 2]

    assert service.generate_image_thumbnail(data, "image/png").success is False
    response = service.get_image_dimensions(data, "image/png")
    assert response.success is False
    assert "failed to decode PNG image" in response.error_message
    assert (response.width, response.height) == (0, 0)
