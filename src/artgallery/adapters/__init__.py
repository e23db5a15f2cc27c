"""Host adapters that render the gallery and forward user intent."""
