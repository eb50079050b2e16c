"""Host-side trigger stores."""
