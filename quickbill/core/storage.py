import httpx
from loguru import logger

from quickbill.core.config import settings
from quickbill.core.metrics import STORAGE_UPLOADS_TOTAL


class StorageError(RuntimeError):
    pass


class StorageClient:
    """Uploads blobs to the storage service and hands back their public URL."""

    def __init__(self, base_url: str, bucket: str, api_key: str | None = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket
        self.api_key = api_key
        self.timeout = timeout

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/object/public/{self.bucket}/{path}"

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        headers = {"Content-Type": content_type or "application/octet-stream"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        logger.info(
            "Uploading object to bucket='{bucket}', path='{path}', size={size}",
            bucket=self.bucket,
            path=path,
            size=len(content),
        )
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
            try:
                resp = await client.post(f"/object/{self.bucket}/{path}", content=content, headers=headers)
            except httpx.RequestError as e:
                STORAGE_UPLOADS_TOTAL.labels(service=settings.SERVICE_NAME, status="connection_error").inc()
                raise StorageError(f"connection error to storage service: {e}") from e

        if resp.status_code >= 400:
            STORAGE_UPLOADS_TOTAL.labels(service=settings.SERVICE_NAME, status="error").inc()
            raise StorageError(f"Storage service error {resp.status_code}: {resp.text}")

        STORAGE_UPLOADS_TOTAL.labels(service=settings.SERVICE_NAME, status="success").inc()
        return self.public_url(path)


def get_storage_client() -> StorageClient:
    return StorageClient(
        base_url=settings.STORAGE_URL,
        bucket=settings.STORAGE_BUCKET,
        api_key=settings.STORAGE_API_KEY,
    )
