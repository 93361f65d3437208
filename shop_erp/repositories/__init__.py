"""Data access layer: one repository per table, all built on CrudRepository."""
