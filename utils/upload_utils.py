from dataclasses import dataclass
from typing import List, Optional

from fastapi import UploadFile

from exceptions import FieldError, ValidationError
from env import MAX_FILE_SIZE_BYTES, MAX_UPLOAD_FILES


@dataclass(frozen=True)
class UploadedImage:
    filename: str
    content_type: str
    data: bytes


def is_image_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.startswith("image/")


async def read_uploaded_images(
    files: Optional[List[UploadFile]],
    max_files: int = MAX_UPLOAD_FILES,
    max_file_size: int = MAX_FILE_SIZE_BYTES,
) -> List[UploadedImage]:
    """
    Read and check an uploaded batch before any of it is analyzed.

    The whole batch is rejected with an itemized ValidationError if there are
    no files, too many files, or any file is not an image or is too large.
    """
    if not files:
        raise ValidationError("No images provided")
    if len(files) > max_files:
        raise ValidationError(
            f"Too many images, at most {max_files} can be analyzed at once",
            [FieldError(field="images", message=f"Received {len(files)} files")],
        )

    images = []
    errors = []
    for index, upload in enumerate(files):
        filename = upload.filename or f"image-{index + 1}"
        if not is_image_type(upload.content_type):
            errors.append(FieldError(field=filename, message="Only image files are allowed"))
            continue
        too_large = FieldError(field=filename, message=f"File exceeds the {max_file_size // (1024 * 1024)}MB limit")
        if upload.size is not None and upload.size > max_file_size:
            errors.append(too_large)
            continue
        # never pull more than one byte past the limit into memory
        data = await upload.read(max_file_size + 1)
        if len(data) > max_file_size:
            errors.append(too_large)
            continue
        images.append(UploadedImage(filename=filename, content_type=upload.content_type, data=data))

    if errors:
        raise ValidationError("Some uploaded files were rejected", errors)
    return images
