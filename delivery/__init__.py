"""Local delivery of rendered images (file or stdout)."""

from delivery.file_sink import STDOUT_PATH, write_file

__all__ = ["STDOUT_PATH", "write_file"]
