"""
Tests for request normalization of the analyze endpoint body.
"""
import pytest

from inkparse.exceptions import MalformedImageEntryError, MissingInputError, TooManyImagesError
from inkparse.models import AnalyzeRequest
from inkparse.pipeline.request_normalizer import ImagePart, normalize_images


class TestNormalizeImages:

    def test_single_image_defaults_mime(self):
        parts = normalize_images(AnalyzeRequest(imageBase64="QUJD"))
        assert parts == [ImagePart("QUJD", "image/jpeg")]

    def test_single_image_keeps_mime(self):
        parts = normalize_images(AnalyzeRequest(imageBase64="QUJD", imageMime="image/png"))
        assert parts[0].mime_type == "image/png"

    def test_image_list_keeps_order(self):
        body = AnalyzeRequest(
            images=[
                {"imageBase64": "one", "imageMime": "image/png"},
                {"imageBase64": "two"},
                {"imageBase64": "three", "imageMime": "  "},
            ]
        )
        parts = normalize_images(body)
        assert [p.payload for p in parts] == ["one", "two", "three"]
        assert [p.mime_type for p in parts] == ["image/png", "image/jpeg", "image/jpeg"]

    def test_image_list_wins_over_single(self):
        body = AnalyzeRequest(imageBase64="single", images=[{"imageBase64": "listed"}])
        assert [p.payload for p in normalize_images(body)] == ["listed"]

    def test_empty_list_falls_back_to_single(self):
        body = AnalyzeRequest(imageBase64="single", images=[])
        assert [p.payload for p in normalize_images(body)] == ["single"]

    def test_custom_default_mime(self):
        parts = normalize_images(AnalyzeRequest(imageBase64="x"), default_mime="image/webp")
        assert parts[0].mime_type == "image/webp"

    def test_missing_input(self):
        with pytest.raises(MissingInputError):
            normalize_images(AnalyzeRequest())
        with pytest.raises(MissingInputError):
            normalize_images(AnalyzeRequest(images=[]))

    def test_too_many_images(self):
        body = AnalyzeRequest(images=[{"imageBase64": f"img{i}"} for i in range(11)])
        with pytest.raises(TooManyImagesError, match="maximum 10 images"):
            normalize_images(body, max_images=10)

    def test_ten_images_allowed(self):
        body = AnalyzeRequest(images=[{"imageBase64": f"img{i}"} for i in range(10)])
        assert len(normalize_images(body, max_images=10)) == 10

    def test_count_checked_before_entries(self):
        body = AnalyzeRequest(images=[{"imageMime": "image/png"}] * 11)
        with pytest.raises(TooManyImagesError):
            normalize_images(body)

    def test_entry_without_payload(self):
        body = AnalyzeRequest(images=[{"imageBase64": "ok"}, {"imageMime": "image/png"}])
        with pytest.raises(MalformedImageEntryError, match="Image 2"):
            normalize_images(body)


def test_data_url():
    assert ImagePart("QUJD", "image/png").data_url() == "data:image/png;base64,QUJD"
