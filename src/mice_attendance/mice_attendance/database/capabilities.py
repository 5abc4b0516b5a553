from __future__ import annotations

import logging
from dataclasses import dataclass

from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchall

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaCapabilities:
    """Optional columns available in the connected schema.

    Resolved once at startup and handed to the components whose SQL depends
    on them, so no query has to probe for a column at call time.
    """

    notification_flags: bool = True
    log_audio_url: bool = True


def detect_capabilities(conn_factory: DatabaseConnection) -> SchemaCapabilities:
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(
            """
            SELECT TABLE_NAME AS table_name, COLUMN_NAME AS column_name
            FROM information_schema.COLUMNS
            WHERE TABLE_SCHEMA=%s AND TABLE_NAME IN ('attendance_records', 'daily_logs')
            """,
            (conn_factory.database,),
        )
        columns = {(r["table_name"], r["column_name"]) for r in fetchall(cur)}

    caps = SchemaCapabilities(
        notification_flags={
            ("attendance_records", "email_sent_in"),
            ("attendance_records", "email_sent_out"),
        }.issubset(columns),
        log_audio_url=("daily_logs", "audio_url") in columns,
    )
    logger.info(
        "Schema capabilities: notification_flags=%s log_audio_url=%s",
        caps.notification_flags,
        caps.log_audio_url,
    )
    return caps
