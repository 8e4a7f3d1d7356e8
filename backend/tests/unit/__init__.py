"""
Unit tests package.

Contains isolated tests for parsers, entities, stores and services that run
without a database or the command line.
"""
