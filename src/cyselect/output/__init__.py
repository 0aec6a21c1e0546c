"""Output formatters and the console logger."""
