"""CSV adapters producing ledger transaction-creation records."""
