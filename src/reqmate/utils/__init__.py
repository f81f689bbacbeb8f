"""Utils package for utility functions"""

from reqmate.utils.file_utils import read_text, read_text_safe, save_artifact
from reqmate.utils.retry import RetryPolicy, is_retryable_http_error

__all__ = [
    "read_text",
    "read_text_safe",
    "save_artifact",
    "RetryPolicy",
    "is_retryable_http_error",
]
