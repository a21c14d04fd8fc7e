"""
Tool Repository Implementation
"""

import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Optional

from src.database import db
from src.models import Tool, ToolPolicy, ToolStatus
from .base import ToolRepositoryInterface

# Per-tool locks for this process; the row lock covers other processes.
# tool_id -> [lock, holders]; an entry lives only while someone holds or waits on it.
_registry_lock = threading.Lock()
_tool_locks = {}


@contextmanager
def _process_lock(tool_id: str):
    with _registry_lock:
        entry = _tool_locks.setdefault(tool_id, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _registry_lock:
            entry[1] -= 1
            if entry[1] == 0:
                del _tool_locks[tool_id]


class ToolRepository(ToolRepositoryInterface):
    """Concrete implementation of the tool directory"""

    def get_by_id(self, tool_id: str) -> Optional[Tool]:
        """Get tool by ID"""
        return Tool.query.filter_by(id=tool_id).first()

    def get_policy(self, tool_id: str) -> Optional[ToolPolicy]:
        """Get the scheduling policy of a tool"""
        tool = self.get_by_id(tool_id)
        return tool.to_policy() if tool else None

    def upsert(self, tool_id: str, **fields) -> Tool:
        """Create or update a tool from directory data"""
        try:
            tool = self.get_by_id(tool_id)
            if tool is None:
                tool = Tool(id=tool_id)
                db.session.add(tool)

            for key, value in fields.items():
                if value is None or not hasattr(tool, key):
                    continue
                if key == 'status' and not isinstance(value, ToolStatus):
                    value = ToolStatus(value)
                setattr(tool, key, value)

            # Validates the resulting policy before it is persisted
            ToolPolicy(
                tool_id=tool_id,
                owner_id=tool.owner_id,
                status=tool.status or ToolStatus.AVAILABLE,
                advance_notice_days=tool.advance_notice_days if tool.advance_notice_days is not None else 1,
                max_loan_days=tool.max_loan_days if tool.max_loan_days is not None else 7,
            )

            tool.updated_at = datetime.utcnow()
            db.session.commit()
            return tool
        except Exception:
            db.session.rollback()
            raise

    def archive(self, tool_id: str) -> Optional[Tool]:
        """Archive a tool removed from the directory"""
        tool = self.get_by_id(tool_id)
        if not tool:
            return None

        tool.status = ToolStatus.ARCHIVED
        tool.updated_at = datetime.utcnow()
        db.session.commit()
        return tool

    @contextmanager
    def locked(self, tool_id: str):
        """
        Critical section for all reservation writes on one tool.

        Holds the in-process lock for `tool_id` and the tool row lock
        (SELECT ... FOR UPDATE) until the block exits. The block is expected
        to commit; anything left uncommitted on error is rolled back.
        Objects loaded before entry are expired and reload inside the block.
        """
        with _process_lock(tool_id):
            # Reads before the lock must not pin a stale snapshot
            if db.session().in_transaction():
                db.session.rollback()
            try:
                tool = Tool.query.filter_by(id=tool_id).with_for_update().first()
                yield tool
            except Exception:
                db.session.rollback()
                raise
            finally:
                # Ends the transaction so the row lock is released with the process lock
                if db.session().in_transaction():
                    db.session.rollback()

    def count_by_owner(self, owner_id: str) -> int:
        """Count tools listed by an owner"""
        return Tool.query.filter(
            Tool.owner_id == owner_id,
            Tool.status != ToolStatus.ARCHIVED
        ).count()
