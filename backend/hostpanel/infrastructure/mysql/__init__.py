from .mysql_admin import MySQLDatabaseAdmin

__all__ = ["MySQLDatabaseAdmin"]
