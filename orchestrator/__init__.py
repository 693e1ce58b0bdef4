"""Search augmentation pipeline: decision, search, limiting, summarization."""
