"""Django applications of the marketplace."""
