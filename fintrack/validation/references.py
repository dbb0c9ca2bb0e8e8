"""
Cross-entity reference checks.

Field validation cannot see other records. These checks run once the
referenced record has been loaded from storage, and raise
ReferentialInconsistency instead of correcting anything.
"""

from typing import Optional, Union

from fintrack.errors import ReferentialInconsistency
from fintrack.models.entities import Budget, Category, Transaction, TransactionType
from fintrack.models.inputs import InsertBudget, InsertTransaction


def check_ownership(
    record: object,
    user_id: str,
    field: str,
    entity_id: Optional[str] = None,
) -> None:
    """
    Ensure a referenced record belongs to user_id.

    Raises:
        ReferentialInconsistency: If the record is owned by someone else
    """
    owner = getattr(record, "user_id", None)
    if owner != user_id:
        raise ReferentialInconsistency(
            f"{field} refers to a record that does not belong to this user",
            field=field,
            entity_id=entity_id or getattr(record, "id", None),
        )


def _check_category_reference(
    category_id: str,
    category: Category,
    user_id: str,
) -> None:
    if category_id != category.id:
        raise ReferentialInconsistency(
            f"categoryId {category_id!r} does not match category {category.id!r}",
            field="categoryId",
            entity_id=category_id,
        )
    check_ownership(category, user_id, field="categoryId", entity_id=category.id)


def check_transaction_category(
    transaction: Union[InsertTransaction, Transaction],
    category: Category,
    user_id: str,
) -> None:
    """
    A transaction must be filed under one of the user's own categories,
    and its type must equal the category's type.

    Raises:
        ReferentialInconsistency: On foreign ownership or type mismatch
    """
    _check_category_reference(transaction.category_id, category, user_id)

    if transaction.type != category.type:
        raise ReferentialInconsistency(
            f"Transaction type {transaction.type.value!r} does not match "
            f"category {category.name!r} of type {category.type.value!r}",
            field="type",
            entity_id=category.id,
        )


def check_budget_category(
    budget: Union[InsertBudget, Budget],
    category: Category,
    user_id: str,
) -> None:
    """
    A budget limits spending, so it must point at one of the user's own
    expense categories.

    Raises:
        ReferentialInconsistency: On foreign ownership or an income category
    """
    _check_category_reference(budget.category_id, category, user_id)

    if category.type != TransactionType.EXPENSE:
        raise ReferentialInconsistency(
            f"Budgets can only track expense categories; {category.name!r} is "
            f"{category.type.value!r}",
            field="categoryId",
            entity_id=category.id,
        )
