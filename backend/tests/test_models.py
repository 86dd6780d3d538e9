"""Checks on the table definitions emitted for the production dialect."""

from __future__ import annotations

import pytest
from sqlalchemy import DateTime
from sqlalchemy.dialects import mysql
from sqlalchemy.schema import CreateTable

from app.models import Base


@pytest.mark.parametrize("table_name", sorted(Base.metadata.tables))
def test_mysql_timestamps_keep_microseconds(table_name):
    table = Base.metadata.tables[table_name]
    ddl = str(CreateTable(table).compile(dialect=mysql.dialect()))

    timestamp_columns = [column.name for column in table.columns if isinstance(column.type, DateTime)]
    assert timestamp_columns
    for name in timestamp_columns:
        assert f"{name} DATETIME(6)" in ddl
