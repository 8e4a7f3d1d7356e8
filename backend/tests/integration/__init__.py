"""
Integration tests package.

Contains tests that run several components together: the SQLAlchemy store
on SQLite, the command flow through create_clinic, and the click CLI.
"""
