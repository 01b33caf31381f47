"""FastAPI application exposing the analysis pipeline."""
