"""
Expense Store Module.

This module persists confirmed receipt drafts as expense records in a
SQLite database and provides the basic record operations around them.

Features:
    - Automatic schema creation
    - Insert from raw fields or from an ExtractionDraft
    - Get, list, partial update and delete by id

Author: ML Engineering Team
"""

import sqlite3
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from config import get_config
from receipt_ocr.extraction.extraction_draft import Category, ExtractionDraft
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.helpers import ensure_directory
from receipt_ocr.utils.exceptions import DatabaseError, ExpenseNotFoundError, ValidationError

logger = get_logger(__name__)

CENTS = Decimal('0.01')


class ExpenseStore:
    """
    SQLite storage for expense records.

    A connection is opened per operation, so instances are cheap and can
    be shared.

    Attributes:
        db_path: Path to the SQLite database file
        table_name: Name of the expenses table
        default_currency: Currency stored with every new expense

    Example:
        >>> store = ExpenseStore("outputs/expenses.db")
        >>> expense = store.insert_draft(draft, notes="team lunch")
        >>> store.get(expense["id"])["merchant"]
        'FRESH GROCERY MART'
    """

    UPDATABLE_FIELDS = ('category', 'amount', 'expense_date', 'notes')

    def __init__(self, db_path: Optional[Union[str, Path]] = None) -> None:
        """
        Initialize the store and create the schema if needed.

        Args:
            db_path: Path to database file. If None, uses configuration.
        """
        if db_path:
            self.db_path = Path(db_path)
        else:
            output_dir = Path(get_config("paths.output_dir", "outputs"))
            db_name = get_config("output.database.name", "expenses.db")
            self.db_path = output_dir / db_name

        self.table_name = get_config("output.database.table_name", "expenses")
        self.default_currency = get_config("output.database.default_currency", "INR")

        ensure_directory(self.db_path.parent)
        self._create_tables()

        logger.info(f"ExpenseStore initialized (db: {self.db_path})")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _create_tables(self) -> None:
        """Create the expenses table and its index."""
        create_sql = f"""
        CREATE TABLE IF NOT EXISTS {self.table_name} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            merchant TEXT,
            category TEXT NOT NULL,
            amount TEXT NOT NULL,
            currency TEXT NOT NULL,
            expense_date TEXT NOT NULL,
            notes TEXT,
            receipt_url TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
        """

        try:
            conn = self._connect()
            try:
                conn.execute(create_sql)
                conn.execute(f"""
                    CREATE INDEX IF NOT EXISTS idx_{self.table_name}_expense_date
                    ON {self.table_name} (expense_date)
                """)
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("create tables", str(e))

        logger.debug("Database tables created/verified")

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_category(value: Any) -> str:
        try:
            return Category(str(value)).value
        except ValueError:
            raise ValidationError("category", value, "unknown category")

    @staticmethod
    def _validate_amount(value: Any) -> str:
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            raise ValidationError("amount", value, "not a number")
        if not amount.is_finite() or amount <= 0:
            raise ValidationError("amount", value, "must be a positive number")
        return str(amount.quantize(CENTS))

    @staticmethod
    def _validate_date(value: Any) -> str:
        try:
            return date.fromisoformat(str(value)).isoformat()
        except ValueError:
            raise ValidationError("expense_date", value, "expected YYYY-MM-DD")

    @staticmethod
    def _row_to_dict(row: sqlite3.Row) -> Dict[str, Any]:
        record = dict(row)
        record['amount'] = Decimal(record['amount'])
        return record

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def insert(
        self,
        category: Any,
        amount: Any,
        expense_date: Any,
        merchant: Optional[str] = None,
        notes: Optional[str] = None,
        receipt_url: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Insert a new expense.

        Args:
            category: Category name (e.g. "Food").
            amount: Positive amount.
            expense_date: Date as YYYY-MM-DD.
            merchant: Optional merchant name.
            notes: Optional free-text notes.
            receipt_url: Optional link to the receipt image.

        Returns:
            The stored record.

        Raises:
            ValidationError: If a required field is missing or invalid.
            DatabaseError: If insertion fails.
        """
        for field_name, value in (('category', category), ('amount', amount),
                                  ('expense_date', expense_date)):
            if value is None or value == '':
                raise ValidationError(field_name, value, "required field is missing")

        values = (
            merchant,
            self._validate_category(category),
            self._validate_amount(amount),
            self.default_currency,
            self._validate_date(expense_date),
            notes or None,
            receipt_url,
        )

        insert_sql = f"""
        INSERT INTO {self.table_name} (
            merchant, category, amount, currency, expense_date, notes, receipt_url
        ) VALUES (?, ?, ?, ?, ?, ?, ?)
        """

        try:
            conn = self._connect()
            try:
                cursor = conn.execute(insert_sql, values)
                conn.commit()
                expense_id = cursor.lastrowid
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("insert", str(e))

        logger.debug(f"Inserted expense {expense_id}")
        return self.get(expense_id)

    def insert_draft(
        self,
        draft: ExtractionDraft,
        notes: Optional[str] = None,
        receipt_url: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Store an extraction draft as an expense.

        Raises:
            ValidationError: If the draft has no amount.
        """
        return self.insert(
            category=draft.category.value,
            amount=draft.amount,
            expense_date=draft.date,
            merchant=draft.merchant,
            notes=notes,
            receipt_url=receipt_url
        )

    def get(self, expense_id: int) -> Dict[str, Any]:
        """
        Retrieve one expense by id.

        Raises:
            ExpenseNotFoundError: If the id does not exist.
        """
        query = f"SELECT * FROM {self.table_name} WHERE id = ?"

        try:
            conn = self._connect()
            try:
                row = conn.execute(query, (expense_id,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("get", str(e))

        if row is None:
            raise ExpenseNotFoundError(expense_id)

        return self._row_to_dict(row)

    def get_all(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Retrieve all expenses, most recent expense date first.

        Args:
            limit: Maximum number of records to retrieve.
        """
        query = f"SELECT * FROM {self.table_name} ORDER BY expense_date DESC, id DESC"
        params: tuple = ()
        if limit:
            query += " LIMIT ?"
            params = (int(limit),)

        try:
            conn = self._connect()
            try:
                rows = conn.execute(query, params).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("get_all", str(e))

        return [self._row_to_dict(row) for row in rows]

    def update(self, expense_id: int, **fields: Any) -> Dict[str, Any]:
        """
        Update some fields of an expense.

        Args:
            expense_id: Id of the expense.
            **fields: Any of category, amount, expense_date, notes.

        Returns:
            The updated record.

        Raises:
            ValidationError: If no updatable field is given or a value is invalid.
            ExpenseNotFoundError: If the id does not exist.
        """
        unknown = sorted(set(fields) - set(self.UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError(unknown[0], fields[unknown[0]], "field cannot be updated")

        updates = []
        params: list = []

        if fields.get('category'):
            updates.append("category = ?")
            params.append(self._validate_category(fields['category']))
        if fields.get('amount'):
            updates.append("amount = ?")
            params.append(self._validate_amount(fields['amount']))
        if fields.get('expense_date'):
            updates.append("expense_date = ?")
            params.append(self._validate_date(fields['expense_date']))
        if 'notes' in fields:
            updates.append("notes = ?")
            params.append(fields['notes'] or None)

        if not updates:
            raise ValidationError("fields", None, "provide at least one field to update")

        query = f"UPDATE {self.table_name} SET {', '.join(updates)} WHERE id = ?"
        params.append(expense_id)

        try:
            conn = self._connect()
            try:
                cursor = conn.execute(query, params)
                conn.commit()
                updated = cursor.rowcount > 0
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("update", str(e))

        if not updated:
            raise ExpenseNotFoundError(expense_id)

        logger.debug(f"Updated expense {expense_id}: {', '.join(updates)}")
        return self.get(expense_id)

    def delete(self, expense_id: int) -> Dict[str, Any]:
        """
        Delete an expense.

        Returns:
            The deleted record.

        Raises:
            ExpenseNotFoundError: If the id does not exist.
        """
        record = self.get(expense_id)

        try:
            conn = self._connect()
            try:
                conn.execute(f"DELETE FROM {self.table_name} WHERE id = ?", (expense_id,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("delete", str(e))

        logger.debug(f"Deleted expense {expense_id}")
        return record

    def get_count(self) -> int:
        """Get the total number of stored expenses."""
        try:
            conn = self._connect()
            try:
                return conn.execute(f"SELECT COUNT(*) FROM {self.table_name}").fetchone()[0]
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("get_count", str(e))
