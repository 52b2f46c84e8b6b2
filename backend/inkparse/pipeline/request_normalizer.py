from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..exceptions import MalformedImageEntryError, MissingInputError, TooManyImagesError
from ..models import AnalyzeRequest


@dataclass(frozen=True)
class ImagePart:
    payload: str
    mime_type: str

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.payload}"


def normalize_images(body: AnalyzeRequest, *, max_images: int = 10, default_mime: str = "image/jpeg") -> List[ImagePart]:
    """Normalize either request form into an ordered list of image parts.

    A non-empty ``images`` list wins over the single-image fields. The count
    limit is checked before the individual entries.
    """
    if body.images:
        if len(body.images) > max_images:
            raise TooManyImagesError(f"Too many images: maximum {max_images} images per request")
        parts: List[ImagePart] = []
        for idx, entry in enumerate(body.images):
            if not entry.imageBase64:
                raise MalformedImageEntryError(f"Image {idx + 1} is missing imageBase64")
            parts.append(ImagePart(entry.imageBase64, (entry.imageMime or "").strip() or default_mime))
        return parts

    if body.imageBase64:
        return [ImagePart(body.imageBase64, (body.imageMime or "").strip() or default_mime)]

    raise MissingInputError("Missing imageBase64 or images in request body")
