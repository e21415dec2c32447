"""Unit tests for the notification webhook client"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from parish_hub.domain.exceptions import NotificationError
from parish_hub.infrastructure.clients.notifications import NotificationClient

WEBHOOK_URL = "http://notifications.test/hooks/transfers"
PAYLOAD = {"event": "TRANSFER_COMPLETED", "transfer_id": "t-1"}


async def test_disabled_client_drops_event():
    client = NotificationClient(webhook_url=None)
    client.webhook_url = None

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        await client.send_event(PAYLOAD)

    assert client.enabled is False
    mock_post.assert_not_called()


async def test_delivers_event():
    client = NotificationClient(webhook_url=WEBHOOK_URL)

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = MagicMock()
        await client.send_event(PAYLOAD)

    mock_post.assert_called_once_with(WEBHOOK_URL, json=PAYLOAD)


@patch("parish_hub.infrastructure.clients.notifications.asyncio.sleep", new_callable=AsyncMock)
async def test_retries_with_backoff_then_fails(mock_sleep: AsyncMock):
    client = NotificationClient(webhook_url=WEBHOOK_URL)
    client.max_retries = 3
    client.backoff_base = 0.5

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(NotificationError):
            await client.send_event(PAYLOAD)

    assert mock_post.call_count == 3
    assert [c.args[0] for c in mock_sleep.call_args_list] == [0.5, 1.0]


@patch("parish_hub.infrastructure.clients.notifications.asyncio.sleep", new_callable=AsyncMock)
async def test_recovers_after_transient_failure(mock_sleep: AsyncMock):
    client = NotificationClient(webhook_url=WEBHOOK_URL)

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = [httpx.ConnectError("connection refused"), MagicMock()]
        await client.send_event(PAYLOAD)

    assert mock_post.call_count == 2
    mock_sleep.assert_awaited_once()
