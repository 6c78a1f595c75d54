from sqlmodel import SQLModel, create_engine
from sqlalchemy.pool import StaticPool
from bookgram.config import settings


def build_engine(url: str, echo: bool = False):
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # in-memory db only exists on its one connection
            return create_engine(url, echo=echo, connect_args=connect_args, poolclass=StaticPool)
        return create_engine(url, echo=echo, connect_args=connect_args)

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,      # checks dead connections
        pool_recycle=1800        # refresh every 30 min
    )


engine = build_engine(settings.database_url)


def create_db_and_tables(bind=None):
  from bookgram.models import book, cart, profile, order, forum, inquiry, auth_user
  SQLModel.metadata.create_all(bind or engine)
