import logging
import os
import uuid
from typing import Dict, Optional

import boto3

from app.core.config import Settings
from app.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class R2Storage:
    """Bucket do Cloudflare R2 (API S3) para os anexos dos atestados."""

    def __init__(self, client, bucket: str, public_base_url: Optional[str] = None):
        self.client = client
        self.bucket = bucket
        self.public_base_url = (public_base_url or "").rstrip("/") or None

    @classmethod
    def from_settings(cls, settings: Settings) -> "R2Storage":
        required = {
            "R2_BUCKET": settings.R2_BUCKET,
            "R2_ENDPOINT": settings.R2_ENDPOINT,
            "R2_ACCESS_KEY_ID": settings.R2_ACCESS_KEY_ID,
            "R2_SECRET_ACCESS_KEY": settings.R2_SECRET_ACCESS_KEY,
        }
        missing = [k for k, v in required.items() if not v]
        if missing:
            raise ConfigurationError(f"Variáveis ausentes: {', '.join(missing)}")

        client = boto3.client(
            "s3",
            endpoint_url=settings.R2_ENDPOINT,
            aws_access_key_id=settings.R2_ACCESS_KEY_ID,
            aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
            region_name="auto",
        )
        return cls(client, settings.R2_BUCKET, settings.R2_PUBLIC_BASE_URL)

    def url_for(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"r2://{self.bucket}/{key}"

    def upload(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        user_id: str,
        folder: str = "atestados",
    ) -> Dict[str, str]:
        ext = os.path.splitext(filename or "")[1].lstrip(".").lower() or "jpg"
        key = f"{folder}/{user_id}/{uuid.uuid4()}.{ext}"

        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        logger.info("upload ok: %s (%d bytes)", key, len(data))
        return {"url": self.url_for(key), "path": key}

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)
        logger.info("arquivo removido: %s", key)
