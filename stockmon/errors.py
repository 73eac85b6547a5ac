"""Exceptions raised by the quote data sources."""


class QuoteError(Exception):
    """A data source could not produce a quote for a symbol."""


class QuoteParseError(QuoteError):
    """The response payload was empty, short or malformed."""
