# backend/services/cloudinary_service.py
"""
Blob store for product images, backed by Cloudinary.

Only the catalog uses it: an upload goes in, a public https URL comes out.
"""

import hashlib
import logging
import os
import time
from typing import Dict, Optional

import cloudinary
import cloudinary.uploader

from config import settings
from services.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"}
PRODUCTS_FOLDER = "products"


class CloudinaryService:
    def __init__(self):
        self._configure_cloudinary()

    def _configure_cloudinary(self):
        cloud_name = settings.CLOUDINARY_CLOUD_NAME
        api_key = settings.CLOUDINARY_API_KEY
        api_secret = settings.CLOUDINARY_API_SECRET

        if not all([cloud_name, api_key, api_secret]):
            raise ValueError(
                "Missing Cloudinary settings: CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET"
            )

        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    def upload_product_image(
        self,
        file_content: bytes,
        filename: str,
        product_id: Optional[str] = None,
    ) -> Dict[str, str]:
        """
        Upload an image and return its public data.

        Returns:
            dict with public_id, url, width, height, format and bytes
        """
        self.validate_image_file(file_content, filename)
        public_id = self._generate_product_public_id(product_id, filename)
        result = cloudinary.uploader.upload(
            file_content,
            public_id=public_id,
            folder=PRODUCTS_FOLDER,
            resource_type="image",
            transformation=[
                {"width": 800, "height": 600, "crop": "limit"},
                {"quality": "auto:good"},
            ],
            format="jpg",
        )
        logger.info(f"Uploaded product image {result['public_id']}")
        return {
            "public_id": result["public_id"],
            "url": result["secure_url"],
            "width": result.get("width"),
            "height": result.get("height"),
            "format": result.get("format"),
            "bytes": result.get("bytes"),
        }

    def delete_image(self, public_id: str) -> bool:
        result = cloudinary.uploader.destroy(public_id, resource_type="image")
        ok = result.get("result") == "ok"
        if not ok:
            logger.warning(f"Cloudinary refused to delete {public_id}: {result}")
        return ok

    def _generate_product_public_id(self, product_id: Optional[str], filename: str) -> str:
        timestamp_hash = hashlib.md5(str(time.time()).encode()).hexdigest()[:8]
        if product_id:
            return f"product_{product_id}_{timestamp_hash}"
        stem = os.path.splitext(os.path.basename(filename))[0] or "image"
        return f"temp_{stem}_{timestamp_hash}"

    def validate_image_file(self, file_content: bytes, filename: str) -> bool:
        file_ext = os.path.splitext(filename or "")[1].lower()
        if file_ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                f"Tipo de arquivo não suportado. Permitidos: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
            )
        if len(file_content) > settings.MAX_IMAGE_BYTES:
            raise ValidationError("Arquivo de imagem muito grande.")
        if not self._is_valid_image_header(file_content):
            raise ValidationError("Arquivo não é uma imagem válida.")
        return True

    def _is_valid_image_header(self, file_content: bytes) -> bool:
        if len(file_content) < 12:
            return False
        if file_content.startswith(b"\xff\xd8\xff"):  # JPEG
            return True
        if file_content.startswith(b"\x89PNG\r\n\x1a\n"):
            return True
        if file_content.startswith((b"GIF87a", b"GIF89a")):
            return True
        if file_content.startswith(b"BM"):
            return True
        if file_content[8:12] == b"WEBP":
            return True
        return False


def public_id_from_url(url: str) -> Optional[str]:
    """products/<id> from a Cloudinary delivery URL, None for foreign URLs."""
    if not url or "cloudinary.com" not in url:
        return None
    name = url.rsplit("/", 1)[-1].split(".")[0]
    return f"{PRODUCTS_FOLDER}/{name}"


_service: Optional[CloudinaryService] = None


def get_cloudinary_service() -> Optional[CloudinaryService]:
    """Shared service instance, or None when Cloudinary is not configured."""
    global _service
    if _service is None:
        try:
            _service = CloudinaryService()
        except ValueError as e:
            logger.warning(f"Cloudinary service not available: {e}")
            return None
    return _service
