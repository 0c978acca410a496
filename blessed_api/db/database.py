from typing import Any, Callable, Dict, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from starlette.requests import Request

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Пул соединений к реляционной БД + фабрика сессий.
    Создаётся один раз при старте приложения, закрывается на shutdown.
    """

    def __init__(self, url: str, **engine_kwargs: Any) -> None:
        if url.startswith("sqlite"):
            connect_args: Dict[str, Any] = engine_kwargs.pop("connect_args", {})
            connect_args.setdefault("check_same_thread", False)
            engine_kwargs["connect_args"] = connect_args
        self.engine = create_engine(
            url,
            pool_pre_ping=True,
            future=True,
            **engine_kwargs,
        )
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False)

    def create_all(self) -> None:
        # модели должны быть импортированы до create_all
        from blessed_api.db.Models import drop_models as _drop_models  # noqa: F401
        from blessed_api.db.Models import product_models as _product_models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_session_factory(request: Request) -> Callable[[], Session]:
    return request.app.state.database.SessionLocal


def get_db(request: Request) -> Generator[Session, None, None]:
    db = get_session_factory(request)()
    try:
        yield db
    finally:
        db.close()
