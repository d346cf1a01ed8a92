"""Parsers that turn the Greed rules document into an Origin and Class catalog."""
