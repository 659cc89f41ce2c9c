"""Output layer — Rich and JSON rendering for CLI commands."""
