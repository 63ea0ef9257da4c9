"""Pydantic schemas shared between the org-todo server and client."""
