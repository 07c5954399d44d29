"""Internship application portal: developer submissions and evaluator reviews."""

__version__ = "0.1.0"
