from databases import Database


def create_database(dsn: str) -> Database:
    """
    Build the store handle for the given DSN.

    Connecting and disconnecting is owned by the caller (the app lifespan, a script or a test
    fixture), nothing in the league logic holds on to a global connection.
    """
    return Database(dsn)
