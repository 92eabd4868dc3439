"""Core types shared by the extraction pipeline."""
