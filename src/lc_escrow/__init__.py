"""LC Escrow - a letter of credit escrow released by a trusted verifier."""

__version__ = "0.1.0"
