"""
Database module - Generic async MongoDB connection using Motor.

Usage:
    from common.database import MongoDB

    db = MongoDB()
    await db.connect(uri, database_name)
    repository = MongoUserRepository(db.db)
"""

from common.database.mongodb import MongoDB

__all__ = ["MongoDB"]
