"""Background jobs and process wiring for the goal vault indexer."""
