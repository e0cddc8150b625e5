"""HTTP boundary to the sql-to-logsql translation service."""
