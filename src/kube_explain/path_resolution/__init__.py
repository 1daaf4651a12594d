"""Path resolution exports."""

from .resource_path_splitter import (
    split_and_parse_resource_request,
    split_and_parse_resource_request_with_matching_prefix,
    split_dot_notation,
)

__all__ = [
    "split_and_parse_resource_request",
    "split_and_parse_resource_request_with_matching_prefix",
    "split_dot_notation",
]
