"""Command line frontend of FieldSeal."""
