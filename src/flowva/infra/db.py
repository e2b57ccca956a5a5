# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from flowva.infra.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Persistence handle built once at start-up and passed to the stores.

    The engine is created on first use. Concurrent first users race on a
    lock and all end up with the same engine.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None
        self._lock = threading.Lock()

    def _factory(self) -> sessionmaker:
        if self._sessionmaker is None:
            with self._lock:
                if self._sessionmaker is None:
                    self._engine = self._create_engine()
                    self._sessionmaker = sessionmaker(
                        autocommit=False,
                        autoflush=False,
                        expire_on_commit=False,
                        bind=self._engine,
                    )
        return self._sessionmaker

    def _create_engine(self) -> Engine:
        url = make_url(self.url)
        connect_args = {}
        if url.get_backend_name() == "sqlite":
            connect_args["check_same_thread"] = False
            if url.database and url.database != ":memory:":
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        logger.info("Opening database %s", url.render_as_string(hide_password=True))
        return create_engine(url, connect_args=connect_args, pool_pre_ping=True)

    @property
    def engine(self) -> Engine:
        self._factory()
        return self._engine

    def init_schema(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self._factory()()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
