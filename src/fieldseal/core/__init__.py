"""Core document model and field transformation of FieldSeal."""
