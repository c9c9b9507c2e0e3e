"""Django app bridging settings and plan records to the availability engine."""
