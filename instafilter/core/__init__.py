"""Core types: pixel buffer, system base class and pipeline."""
