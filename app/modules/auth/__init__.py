"""
Identificación del usuario a partir del JWT del proveedor de autenticación.
"""
