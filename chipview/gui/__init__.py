"""PyQt5 host for the layout viewer (optional ``gui`` extra)."""
