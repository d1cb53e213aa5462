"""Pydantic request/response schemas and question set contracts."""
