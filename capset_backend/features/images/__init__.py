"""Image file operations."""
from .service import crop_image, delete_image

__all__ = ["crop_image", "delete_image"]
