"""SlipDeck - state backend for the media automation admin client."""

__version__ = "0.1.0"
