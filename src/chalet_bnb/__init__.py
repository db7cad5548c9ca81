"""Chalet BnB: reservation queries, updates and reports on MongoDB."""

__version__ = '0.1.0'
