"""Public parsing API for robust tag extraction."""

from .parser import TagParser, normalize_tag_names, parse, parse_file

__all__ = ["TagParser", "normalize_tag_names", "parse", "parse_file"]
