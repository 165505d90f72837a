"""Prepwise: interview-prep problem generation and evaluation service."""
