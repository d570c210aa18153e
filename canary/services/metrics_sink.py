"""Metrics sinks that receive latency and availability samples."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import ErrorKind
from ..utils.metrics import MetricSample, OperationResult


class MetricsSink(ABC):
    """Destination for metric samples. Submissions never raise."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = (logger or logging.getLogger(__name__)).getChild(self.__class__.__name__)

    @abstractmethod
    async def submit(self, sample: MetricSample) -> OperationResult:
        """
        Submit one sample.

        Returns:
            OperationResult: ``ok`` on success, ``METRIC_SUBMISSION`` failure otherwise
        """
        pass


class CloudWatchMetricsSink(MetricsSink):
    """Publishes samples with CloudWatch ``put_metric_data``."""

    def __init__(
        self,
        region: str,
        client: Any = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize CloudWatch sink.

        Args:
            region: AWS region of the CloudWatch endpoint
            client: Optional pre-built boto3 CloudWatch client
            logger: Optional logger instance
        """
        super().__init__(logger)
        self.region = region
        self.client = client or boto3.client('cloudwatch', region_name=region)

    async def submit(self, sample: MetricSample) -> OperationResult:
        # Run blocking boto3 call in thread pool
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._put_metric_data, sample)

    def _put_metric_data(self, sample: MetricSample) -> OperationResult:
        try:
            self.client.put_metric_data(
                Namespace=sample.namespace,
                MetricData=[{
                    'MetricName': sample.name,
                    'Dimensions': [
                        {'Name': name, 'Value': value}
                        for name, value in sample.dimensions.items()
                    ],
                    'Timestamp': sample.timestamp,
                    'Unit': sample.unit.value,
                    'Value': sample.value,
                }]
            )
        except (ClientError, BotoCoreError) as e:
            return OperationResult.failure(ErrorKind.METRIC_SUBMISSION, f"{type(e).__name__}: {e}")
        except Exception as e:
            return OperationResult.failure(ErrorKind.METRIC_SUBMISSION, f"Unexpected error: {e}")

        self.logger.info(f"Metric {sample.name} with value {sample.value} pushed to CloudWatch")
        return OperationResult.success()


class DryRunMetricsSink(MetricsSink):
    """Writes samples to the application log instead of CloudWatch."""

    async def submit(self, sample: MetricSample) -> OperationResult:
        self.logger.info(
            f"DRY RUN metric {sample.name}={sample.value}",
            extra={
                "namespace": sample.namespace,
                "unit": sample.unit.value,
                "dimensions": sample.dimensions,
            }
        )
        return OperationResult.success()
