"""Durable stores for per-run log records."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import ErrorKind
from ..utils.metrics import OperationResult


class LogStore(ABC):
    """Append-only object store. ``put`` never raises."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = (logger or logging.getLogger(__name__)).getChild(self.__class__.__name__)

    @abstractmethod
    async def put(self, bucket: str, key: str, body: bytes) -> OperationResult:
        """
        Store one object.

        Returns:
            OperationResult: ``ok`` on success, ``LOG_PERSIST`` failure otherwise
        """
        pass


class S3LogStore(LogStore):
    """Stores log records as S3 objects."""

    def __init__(
        self,
        region: str,
        client: Any = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize S3 store.

        Args:
            region: AWS region of the bucket
            client: Optional pre-built boto3 S3 client
            logger: Optional logger instance
        """
        super().__init__(logger)
        self.region = region
        self.client = client or boto3.client('s3', region_name=region)

    async def put(self, bucket: str, key: str, body: bytes) -> OperationResult:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._put_object, bucket, key, body)

    def _put_object(self, bucket: str, key: str, body: bytes) -> OperationResult:
        try:
            self.client.put_object(
                Bucket=bucket,
                Key=key,
                Body=body,
                ContentType='text/plain; charset=utf-8'
            )
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            return OperationResult.failure(ErrorKind.LOG_PERSIST, f"ClientError ({error_code}): {e}")
        except BotoCoreError as e:
            return OperationResult.failure(ErrorKind.LOG_PERSIST, f"{type(e).__name__}: {e}")
        except Exception as e:
            return OperationResult.failure(ErrorKind.LOG_PERSIST, f"Unexpected error: {e}")

        return OperationResult.success()


class DryRunLogStore(LogStore):
    """Writes the record to the application log instead of S3."""

    async def put(self, bucket: str, key: str, body: bytes) -> OperationResult:
        self.logger.info(f"DRY RUN log record {key}", extra={"bucket": bucket})
        self.logger.info(body.decode('utf-8'))
        return OperationResult.success()
