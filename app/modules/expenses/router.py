from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from app.dependencies.storageDependencies import storage_dependency
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from app.modules.expenses.schemas import (
    ExpenseCategoryCreate, ExpenseCategoryOut, ExpenseCreate, ExpenseFilters,
    ExpenseList, ExpenseOut, ExpenseUpdate
)
from app.modules.expenses.service import ExpenseService

router = APIRouter(prefix="/expenses", tags=["Expenses"])


# ===== CATEGORÍAS =====

@router.get("/categories", response_model=List[ExpenseCategoryOut])
async def list_categories(
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Categorías de gasto (se crean las de por defecto la primera vez)"""
    return ExpenseService(storage).list_categories(auth_context.user_id)


@router.post("/categories", response_model=ExpenseCategoryOut, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: ExpenseCategoryCreate,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    return ExpenseService(storage).create_category(data, auth_context.user_id)


# ===== GASTOS =====

@router.post("/", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
async def create_expense(
    data: ExpenseCreate,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Registrar un gasto

    - **category**, **description**, **amount** (> 0): requeridos
    - **is_billable** / **client_id**: gasto facturable a un cliente
    """
    return ExpenseService(storage).create_expense(data, auth_context.user_id)


@router.get("/", response_model=ExpenseList)
async def list_expenses(
    storage: storage_dependency,
    category: Optional[str] = Query(None),
    month: Optional[str] = Query(None, description="AAAA-MM"),
    search: Optional[str] = Query(None, description="Descripción o categoría"),
    is_billable: Optional[bool] = Query(None),
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Listar gastos con filtros y resumen"""
    filters = ExpenseFilters(category=category, month=month, search=search, is_billable=is_billable)
    return ExpenseService(storage).list_expenses(auth_context.user_id, filters)


@router.get("/{expense_id}", response_model=ExpenseOut)
async def get_expense(
    expense_id: str,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    return ExpenseService(storage).get_expense(expense_id, auth_context.user_id)


@router.patch("/{expense_id}", response_model=ExpenseOut)
async def update_expense(
    expense_id: str,
    data: ExpenseUpdate,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    return ExpenseService(storage).update_expense(expense_id, data, auth_context.user_id)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    expense_id: str,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    ExpenseService(storage).delete_expense(expense_id, auth_context.user_id)
