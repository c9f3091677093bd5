"""PostgreSQL persistence for catalogs and photo references."""
