"""Sibling caption (tag list) files."""
from .store import (
    CaptionData,
    add_tag,
    caption_path_for,
    caption_text,
    clear_all_captions,
    parse_tags,
    read_caption,
    remove_tag,
    reorder_tags,
    serialize_tags,
    write_caption,
)

__all__ = [
    "CaptionData",
    "add_tag",
    "caption_path_for",
    "caption_text",
    "clear_all_captions",
    "parse_tags",
    "read_caption",
    "remove_tag",
    "reorder_tags",
    "serialize_tags",
    "write_caption",
]
