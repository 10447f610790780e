import logging
from typing import Optional

import boto3
from botocore.exceptions import ClientError
from supabase import Client

from palace.config import settings

logger = logging.getLogger(__name__)


class SupabaseAudioStorage:
    """Public Supabase Storage bucket holding cached narration audio"""

    def __init__(self, supabase: Client, bucket: Optional[str] = None):
        self.supabase = supabase
        self.bucket = bucket or settings.audio_bucket

    def upload_audio(self, audio: bytes, key: str, content_type: str = "audio/mpeg") -> str:
        """Upload audio and return its public URL"""
        bucket = self.supabase.storage.from_(self.bucket)
        bucket.upload(key, audio, {"content-type": content_type, "upsert": "true"})
        return bucket.get_public_url(key)

    def delete_audio(self, key: str) -> bool:
        try:
            self.supabase.storage.from_(self.bucket).remove([key])
            return True
        except Exception as e:
            logger.error(f"Failed to delete audio from storage: {str(e)}")
            return False


class S3AudioStorage:
    def __init__(self):
        if not all([settings.aws_access_key_id, settings.aws_secret_access_key, settings.s3_bucket_name]):
            raise ValueError("AWS S3 credentials and bucket name must be configured")

        self.s3_client = boto3.client(
            "s3",
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.s3_bucket_name

    def public_url(self, key: str) -> str:
        if settings.s3_public_base_url:
            return f"{settings.s3_public_base_url.rstrip('/')}/{key}"
        return f"https://{self.bucket_name}.s3.{settings.aws_region}.amazonaws.com/{key}"

    def upload_audio(self, audio: bytes, key: str, content_type: str = "audio/mpeg") -> str:
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=audio,
                ContentType=content_type,
                CacheControl="public, max-age=31536000"
            )
        except ClientError as e:
            logger.error(f"Failed to upload audio to S3: {str(e)}")
            raise
        return self.public_url(key)

    def delete_audio(self, key: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            logger.error(f"Failed to delete audio from S3: {str(e)}")
            return False


def get_audio_storage(supabase: Client):
    if settings.audio_storage_backend == "s3":
        return S3AudioStorage()
    return SupabaseAudioStorage(supabase)
