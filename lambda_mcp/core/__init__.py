"""Core building blocks: errors and logging."""
