from .local_blob_store import LocalBlobStore
from .s3_blob_store import S3BlobStore

__all__ = [
    "LocalBlobStore",
    "S3BlobStore",
]
