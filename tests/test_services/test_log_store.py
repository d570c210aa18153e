"""Tests for log stores."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from canary.errors import ErrorKind
from canary.services.log_store import DryRunLogStore, S3LogStore


@pytest.mark.asyncio
async def test_s3_put(logger):
    client = MagicMock()
    store = S3LogStore("ap-southeast-2", client=client, logger=logger)

    result = await store.put("canary-logs", "logs/1.txt", b"Name: A")

    assert result.ok
    client.put_object.assert_called_once_with(
        Bucket="canary-logs",
        Key="logs/1.txt",
        Body=b"Name: A",
        ContentType='text/plain; charset=utf-8'
    )


@pytest.mark.asyncio
async def test_s3_access_denied():
    client = MagicMock()
    client.put_object.side_effect = ClientError(
        {'Error': {'Code': 'AccessDenied', 'Message': 'Access Denied'}},
        'PutObject'
    )
    store = S3LogStore("ap-southeast-2", client=client)

    result = await store.put("canary-logs", "logs/1.txt", b"")

    assert not result.ok
    assert result.error_kind == ErrorKind.LOG_PERSIST
    assert "AccessDenied" in result.error


@pytest.mark.asyncio
async def test_s3_connection_error():
    client = MagicMock()
    client.put_object.side_effect = EndpointConnectionError(endpoint_url="https://s3.amazonaws.com")
    store = S3LogStore("ap-southeast-2", client=client)

    result = await store.put("canary-logs", "logs/1.txt", b"")

    assert not result.ok
    assert result.error_kind == ErrorKind.LOG_PERSIST


@pytest.mark.asyncio
async def test_dry_run_store(logger):
    store = DryRunLogStore(logger)

    result = await store.put("dry-run", "logs/1.txt", "Name: ü".encode("utf-8"))

    assert result.ok
