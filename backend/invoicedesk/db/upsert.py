from typing import Any, Dict, List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.dialects import postgresql, sqlite

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def insert_on_conflict_do_nothing(
    db: AsyncSession,
    model: Any,
    rows: List[Dict[str, Any]],
    *,
    conflict_columns: Sequence[str],
) -> int:
    """
    Insert `rows` in one statement, leaving rows that collide on
    `conflict_columns` untouched. Returns the number of rows actually inserted.
    """
    if not rows:
        return 0
    dialect_name = db.get_bind().dialect.name
    try:
        insert = _DIALECT_INSERTS[dialect_name]
    except KeyError:
        raise NotImplementedError(f"Upsert is not supported for the '{dialect_name}' dialect")

    stmt = insert(model).values(rows).on_conflict_do_nothing(index_elements=list(conflict_columns))
    result = await db.execute(stmt)
    return result.rowcount or 0
