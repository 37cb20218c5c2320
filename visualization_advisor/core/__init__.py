"""Shared constants, configuration, exceptions, logging and cell values."""
