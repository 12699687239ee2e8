"""Cross-cutting domain primitives: error taxonomy and request deadlines."""
