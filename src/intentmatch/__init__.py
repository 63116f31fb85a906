"""Semantic intent matcher: answer questions from a fixed Q&A knowledge base."""

__version__ = "0.1.0"
