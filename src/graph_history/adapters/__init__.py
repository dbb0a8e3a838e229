"""Host adapters for the history session."""
