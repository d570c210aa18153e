"""Tests for metrics sinks."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from canary.errors import ErrorKind
from canary.services.metrics_sink import CloudWatchMetricsSink, DryRunMetricsSink
from canary.utils.metrics import MetricSample, MetricUnit


def latency_sample():
    return MetricSample(
        namespace="LambdaFunctionMetrics",
        name="URLLatency",
        value=87,
        unit=MetricUnit.MILLISECONDS,
        dimensions={"URL": "Google"},
        timestamp=datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    )


@pytest.mark.asyncio
async def test_cloudwatch_submit(logger):
    client = MagicMock()
    sink = CloudWatchMetricsSink("ap-southeast-2", client=client, logger=logger)

    result = await sink.submit(latency_sample())

    assert result.ok
    client.put_metric_data.assert_called_once_with(
        Namespace="LambdaFunctionMetrics",
        MetricData=[{
            'MetricName': "URLLatency",
            'Dimensions': [{'Name': "URL", 'Value': "Google"}],
            'Timestamp': datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
            'Unit': "Milliseconds",
            'Value': 87,
        }]
    )


@pytest.mark.asyncio
async def test_cloudwatch_submit_without_dimensions():
    client = MagicMock()
    sink = CloudWatchMetricsSink("ap-southeast-2", client=client)

    await sink.submit(MetricSample("LambdaFunctionMetrics", "AvailableURLCount", 2, MetricUnit.COUNT))

    metric = client.put_metric_data.call_args.kwargs["MetricData"][0]
    assert metric['Dimensions'] == []
    assert metric['Unit'] == "Count"
    assert metric['Timestamp'] is not None


@pytest.mark.asyncio
async def test_cloudwatch_client_error():
    client = MagicMock()
    client.put_metric_data.side_effect = ClientError(
        {'Error': {'Code': 'Throttling', 'Message': 'Rate exceeded'}},
        'PutMetricData'
    )
    sink = CloudWatchMetricsSink("ap-southeast-2", client=client)

    result = await sink.submit(latency_sample())

    assert not result.ok
    assert result.error_kind == ErrorKind.METRIC_SUBMISSION
    assert "Throttling" in result.error


@pytest.mark.asyncio
async def test_cloudwatch_connection_error():
    client = MagicMock()
    client.put_metric_data.side_effect = EndpointConnectionError(
        endpoint_url="https://monitoring.ap-southeast-2.amazonaws.com"
    )
    sink = CloudWatchMetricsSink("ap-southeast-2", client=client)

    result = await sink.submit(latency_sample())

    assert not result.ok
    assert result.error_kind == ErrorKind.METRIC_SUBMISSION


@pytest.mark.asyncio
async def test_dry_run_sink_accepts_everything(logger):
    sink = DryRunMetricsSink(logger)

    result = await sink.submit(latency_sample())

    assert result.ok
