"""Service layer for The Local Yield."""
