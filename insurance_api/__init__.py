"""Insurance quote lifecycle and policy issuance service."""

__version__ = "0.1.0"
