"""Infrastructure module - settings, logging setup and the catalog client."""
