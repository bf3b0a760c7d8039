from connect3.migrations.migrator import MIGRATIONS, Migration, MigrationError, Migrator

__all__ = ["MIGRATIONS", "Migration", "MigrationError", "Migrator"]
