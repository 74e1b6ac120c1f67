"""
Slack file upload client.
Uses the external upload flow: request an upload URL, POST the bytes there,
then complete the upload and share the file into a channel.
"""

import logging

import requests

from api.errors import SinkError

logger = logging.getLogger(__name__)

SLACK_API_BASE = "https://slack.com/api"


def _call(method: str, token: str, *, timeout: float, **kwargs) -> dict:
    """POST to a Slack Web API method and return the JSON body; raise SinkError unless ok."""
    url = f"{SLACK_API_BASE}/{method}"
    try:
        resp = requests.post(
            url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            **kwargs,
        )
        resp.raise_for_status()
        body = resp.json()
    except requests.RequestException as e:
        logger.warning("Slack %s request failed: %s", method, e)
        raise SinkError(f"slack {method} failed: {e}") from e
    except ValueError as e:
        raise SinkError(f"slack {method} returned invalid JSON") from e

    if not body.get("ok"):
        error = body.get("error", "unknown_error")
        logger.warning("Slack %s not ok: %s", method, error)
        raise SinkError(f"slack {method}: {error}")
    return body


def upload_file(
    token: str,
    channel: str,
    title: str,
    data: bytes,
    filename: str = "plot.png",
    *,
    timeout: float = 30,
) -> str:
    """
    Upload data to Slack and share it in channel.

    Args:
        token: Slack API token (bot or user token with files:write).
        channel: Channel ID to share the file into.
        title: Title shown for the file.
        data: File contents.
        filename: Name of the uploaded file; its extension drives Slack's preview.
        timeout: HTTP timeout in seconds, per request.

    Returns:
        The Slack file ID.

    Raises:
        SinkError: authentication, transport, or API error at any step.
    """
    ticket = _call(
        "files.getUploadURLExternal",
        token,
        timeout=timeout,
        data={"filename": filename, "length": len(data)},
    )
    upload_url = ticket["upload_url"]
    file_id = ticket["file_id"]

    try:
        resp = requests.post(upload_url, files={"file": (filename, data)}, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Slack upload of file_id=%s failed: %s", file_id, e)
        raise SinkError(f"slack upload failed: {e}") from e

    _call(
        "files.completeUploadExternal",
        token,
        timeout=timeout,
        json={"files": [{"id": file_id, "title": title}], "channel_id": channel},
    )
    logger.info("Slack file_id=%s shared to channel=%s bytes=%s", file_id, channel, len(data))
    return file_id
