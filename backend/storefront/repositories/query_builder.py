"""
Storefront Backend: Dynamic Query Builder
===========================================

What:  Composes the WHERE / ORDER BY / LIMIT part of product listing and
       count queries from one search/sort/paginate description.
How:   SQLAlchemy Core. Every caller-supplied value (store id, search term,
       limit, offset) becomes a bound parameter; the sort column and
       direction are picked from whitelists, never formatted into SQL.

Generated shape (list query, store-scoped, with search):
    SELECT ... FROM products
    WHERE 1=1
      AND products.store_id = $1
      AND (products.name ILIKE $2)
    ORDER BY products.price ASC
    LIMIT $3 OFFSET $4

The count query is built from the same SearchFilterPagination with
`use_pagination=False`, so both queries always agree on the filter.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Select, or_, text
from sqlalchemy.dialects.postgresql import asyncpg
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import InstrumentedAttribute

from storefront.models.product import Product

# Columns matched (OR-ed) by the free-text search
SEARCHABLE_FIELDS: Tuple[InstrumentedAttribute, ...] = (Product.name,)

SORTABLE_FIELDS: Dict[str, InstrumentedAttribute] = {
    "price": Product.price,
    "name": Product.name,
    "created_at": Product.created_at,
}


@dataclass
class SearchFilterPagination:
    """
    Query-shaping value object. Never persisted.

    Attributes:
        limit:          Page size; 0 means "no LIMIT"
        offset:         Rows to skip
        search:         Case-insensitive substring; empty means no search
        sort_by:        Key of SORTABLE_FIELDS; empty means no ORDER BY
        sort_direction: "ASC" or "DESC"
    """

    limit: int = 0
    offset: int = 0
    search: str = ""
    sort_by: str = ""
    sort_direction: str = "DESC"

    def build_where(
        self,
        base: Select,
        use_pagination: bool,
        store_id: Optional[str] = None,
    ) -> Select:
        """
        Apply these filters to `base` and return the new statement.

        Args:
            base:           SELECT over the products table
            use_pagination: Apply ORDER BY and LIMIT/OFFSET (list queries only)
            store_id:       Restrict to one store's products
        """
        stmt = base.where(text("1=1"))

        if store_id is not None:
            stmt = stmt.where(Product.store_id == store_id)

        if self.search:
            pattern = f"%{self.search}%"
            stmt = stmt.where(or_(*(field.ilike(pattern) for field in SEARCHABLE_FIELDS)))

        if use_pagination and self.sort_by:
            column = SORTABLE_FIELDS.get(self.sort_by)
            if column is not None:
                ordering = column.asc() if self.sort_direction.upper() == "ASC" else column.desc()
                stmt = stmt.order_by(ordering)
            if self.limit:
                stmt = stmt.limit(self.limit).offset(self.offset)

        return stmt


def render_query(stmt: Select, dialect: Optional[Dialect] = None) -> Tuple[str, List[Any]]:
    """
    Compile `stmt` without executing it.

    Returns:
        The SQL text with positional placeholders and the parameter values in
        placeholder order. Defaults to the PostgreSQL (asyncpg) dialect.
    """
    compiled = stmt.compile(dialect=dialect or asyncpg.dialect())
    params = compiled.params
    names = compiled.positiontup or list(params)
    return str(compiled), [params[name] for name in names]
