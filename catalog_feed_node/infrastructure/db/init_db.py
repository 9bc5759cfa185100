from sqlmodel import Session, SQLModel, create_engine

from catalog_feed_node.config.runtime import database_url
from catalog_feed_node.infrastructure.db.db_tables import OptionRow

engine = create_engine(database_url())

_migrated = False


def init_db(bind=None) -> None:
    SQLModel.metadata.create_all(bind or engine, tables=[OptionRow.__table__])


def create_session() -> Session:
    global _migrated
    if not _migrated:
        init_db()
        _migrated = True
    return Session(engine)


if __name__ == "__main__":
    init_db()
