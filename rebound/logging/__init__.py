"""Match logging and output."""

from rebound.logging.match_log import MatchLog
from rebound.logging.markdown_writer import MarkdownMatchWriter

__all__ = ["MatchLog", "MarkdownMatchWriter"]
