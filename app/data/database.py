# app/data/database.py
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DataError, IntegrityError, OperationalError, SQLAlchemyError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.domain.exceptions import ConflictError, DomainError, ServiceUnavailableError, StorageError, ValidationError
from app.utils.logging import get_logger
from app.utils.retry import db_retry
from app.utils.settings import (
    DATABASE_URL,
    DB_CONNECT_RETRIES,
    DB_CONNECT_RETRY_DELAY,
    DB_MAX_OVERFLOW,
    DB_POOL_SIZE,
    DB_POOL_TIMEOUT,
)

logger = get_logger(__name__)

Base = declarative_base()

T = TypeVar("T")


def _enable_sqlite_locking(engine: Engine) -> None:
    #sqlite nie ma blokad wierszy, BEGIN IMMEDIATE serializuje zapisujacych
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def make_engine(url: str = DATABASE_URL) -> Engine:
    if url.startswith("sqlite"):
        pool_args = {}
        if ":memory:" not in url:
            pool_args = {
                "pool_size": DB_POOL_SIZE,
                "max_overflow": DB_MAX_OVERFLOW,
                "pool_timeout": DB_POOL_TIMEOUT,
            }
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": 30},
            **pool_args,
        )
        _enable_sqlite_locking(engine)
        return engine

    return create_engine(
        url,
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
        pool_timeout=DB_POOL_TIMEOUT,
        pool_pre_ping=True,
    )


class TransactionProvider:
    """
    Jedyne miejsce ktore robi commit i rollback.

    - acquire: sesja z polaczeniem z puli, ograniczone ponawianie, potem 503
    - transaction: commit przy sukcesie, rollback przy kazdym wyjatku
    - sesja zawsze wraca do puli (close w finally)
    """

    def __init__(
        self,
        engine: Engine,
        retries: int = DB_CONNECT_RETRIES,
        retry_delay: float = DB_CONNECT_RETRY_DELAY,
    ):
        self.engine = engine
        self.session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self.retries = retries
        self.retry_delay = retry_delay

    def acquire(self) -> Session:
        try:
            for attempt in db_retry(self.retries, self.retry_delay):
                with attempt:
                    session = self.session_factory()
                    try:
                        #wymusza checkout polaczenia z puli
                        session.connection()
                    except Exception:
                        session.close()
                        raise
        except (OperationalError, PoolTimeoutError) as e:
            logger.error(f"Baza niedostepna po {self.retries} probach: {e}")
            raise ServiceUnavailableError("Database is unavailable, try again later") from e

        return session

    @contextmanager
    def session(self) -> Iterator[Session]:
        session = self.acquire()
        try:
            yield session
        except SQLAlchemyError as e:
            logger.error(f"Blad bazy przy odczycie: {e}")
            raise StorageError("Database operation failed") from e
        finally:
            session.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        session = self.acquire()
        try:
            yield session
            session.commit()
        except DomainError:
            session.rollback()
            raise
        except DataError as e:
            #wartosc poza zakresem kolumny
            session.rollback()
            logger.warning(f"Niepoprawna wartosc, rollback: {e.orig}")
            raise ValidationError("Value is out of range for the database") from e
        except IntegrityError as e:
            session.rollback()
            logger.warning(f"Naruszenie ograniczenia, rollback: {e.orig}")
            raise ConflictError("Operation violates a data constraint") from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Blad bazy, rollback: {e}")
            raise StorageError("Database operation failed") from e
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    def run_in_transaction(self, fn: Callable[[Session], T]) -> T:
        with self.transaction() as session:
            return fn(session)

    def ping(self) -> bool:
        with self.session() as session:
            session.execute(text("SELECT 1"))
        return True


engine = make_engine()

_provider: TransactionProvider | None = None


def get_provider() -> TransactionProvider:
    global _provider
    if _provider is None:
        _provider = TransactionProvider(engine)
    return _provider
