"""Server-rendered UI building blocks: list view, dialog shell, forms and navigation."""
