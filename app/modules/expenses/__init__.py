"""
Gastos del negocio y sus categorías.
"""
