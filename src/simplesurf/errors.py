"""Exceptions raised by SimpleSURF"""


class SimpleSURFError(Exception):
    """Base class for SimpleSURF errors"""


class InvalidArgumentError(SimpleSURFError, ValueError):
    """Raised when a required input is missing or out of range"""
