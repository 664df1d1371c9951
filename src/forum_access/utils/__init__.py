"""Utility helpers for forum-access."""

from .text import (
    slugify,
    is_number,
    utf16_length,
    is_url,
    is_calendar_date,
    parse_birthday,
    is_email_valid,
    is_username_valid,
    parse_json_list,
    is_json,
)

__all__ = [
    "slugify",
    "is_number",
    "utf16_length",
    "is_url",
    "is_calendar_date",
    "parse_birthday",
    "is_email_valid",
    "is_username_valid",
    "parse_json_list",
    "is_json",
]
