"""Pure domain layer: paths, ids, schema, rows, validation, lifecycle."""
