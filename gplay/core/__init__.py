"""Core building blocks: results, structured data helpers, config, exit codes."""
