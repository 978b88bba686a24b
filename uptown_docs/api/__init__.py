"""HTTP surface: bearer-token guard and the /api/documents router."""
