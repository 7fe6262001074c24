"""justssml parser entry point."""

import logging

from .errors import ParseError
from .policy import DEFAULT_CONFIG, ParseConfig
from .scanner import scan
from .treebuilder import TreeBuilder

logger = logging.getLogger(__name__)


class JustSSML:
    """Parse an SSML string on construction; the result is ``document``."""

    __slots__ = ("config", "document", "tree_builder")

    def __init__(self, ssml, *, config=None, tree_builder=None):
        self.config = config or DEFAULT_CONFIG
        self.tree_builder = tree_builder or TreeBuilder(self.config)
        logger.debug("Parsing %d characters of SSML", len(ssml or ""))
        try:
            for token in scan(ssml or ""):
                self.tree_builder.process_token(token)
            self.document = self.tree_builder.finish()
        except ParseError as exc:
            logger.debug("Rejected SSML: %s", exc)
            raise
        logger.debug(
            "Parsed %d tags and %d characters of text",
            len(self.document.tags()),
            len(self.document.get_text()),
        )


def parse_ssml(ssml: str, config: ParseConfig | None = None):
    """Parse ``ssml`` into a Document, raising a ParseError subclass on invalid input."""
    return JustSSML(ssml, config=config).document
