"""Stateless HTTP service building Solana keypairs, signatures and instructions."""

__version__ = "0.1.0"
