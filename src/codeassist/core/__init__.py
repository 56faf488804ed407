"""Core configuration, validation, logging and error taxonomy."""
