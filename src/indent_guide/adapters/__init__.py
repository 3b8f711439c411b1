"""Host adapters wiring the engine to concrete UIs."""
