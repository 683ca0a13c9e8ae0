"""Vocabulary validation and pydantic schemas."""
