"""spanscript: run multi-statement SQL scripts against Cloud Spanner."""
