"""Slack file upload client."""

from api.slack.client import upload_file

__all__ = ["upload_file"]
