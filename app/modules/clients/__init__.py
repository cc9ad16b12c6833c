"""
Clientes a los que se emiten facturas.
"""
