# natheme/db.py

import os
from natheme import settings
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session


# only needed for psycopg 3 - replace postgresql
# with postgresql+psycopg in settings.DATABASE_URL
URL = settings.TEST_DATABASE_URL if os.getenv("TESTING") == "1" else settings.DATABASE_URL
connection_string = str(URL).replace(
    "postgresql://", "postgresql+psycopg://"
)


if connection_string.startswith("sqlite"):
    # a single shared connection keeps an in-memory database alive across sessions
    engine = create_engine(
        connection_string,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    # recycle connections after 5 minutes
    # to correspond with the compute scale down
    engine = create_engine(
        connection_string, connect_args={}, pool_recycle=300
    )


def create_db_and_tables()->None:
    SQLModel.metadata.create_all(engine)

def get_session():
    with Session(engine) as session:
        yield session
