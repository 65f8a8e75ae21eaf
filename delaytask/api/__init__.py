"""
API module.
Contains the FastAPI application for producers and operators.
"""
