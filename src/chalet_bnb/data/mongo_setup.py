import logging

import mongoengine # Import the MongoEngine library used to define models and manage MongoDB connections.

from chalet_bnb.infrastructure.config import Settings, settings as default_settings

log = logging.getLogger(__name__)

# Every document in data/ binds to this alias through meta['db_alias'].
DB_ALIAS = 'core'

"""
Initialize MongoEngine and register the application's default connection.

- Registers a connection alias named 'core' that points to the configured database.
- Call this once during application startup before using models that
    specify `meta = {'db_alias': 'core'}` so they bind to this connection.
- mongo_client_class replaces pymongo.MongoClient (tests pass mongomock.MongoClient).
"""
def global_init(settings: Settings = None, mongo_client_class=None):
    settings = settings or default_settings

    kwargs = {}
    if mongo_client_class is not None:
        kwargs['mongo_client_class'] = mongo_client_class

    mongoengine.register_connection(
        alias=DB_ALIAS,
        name=settings.db_name,
        host=settings.mongo_host,
        port=settings.mongo_port,
        uuidRepresentation='standard',
        **kwargs
    )
    log.info("Registered MongoDB connection '%s' -> %s:%s/%s",
             DB_ALIAS, settings.mongo_host, settings.mongo_port, settings.db_name)


"""Drop the 'core' connection again (used by tests and on shutdown)."""
def global_close():
    mongoengine.disconnect(alias=DB_ALIAS)
