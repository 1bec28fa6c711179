"""DuckDB persistence: ledger state, sandbox token, audit log."""
