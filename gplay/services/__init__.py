"""Edit sessions, catalog listings, upload workflow and command dispatch."""
