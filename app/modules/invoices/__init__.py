"""
Módulo de Facturas

- ledger: ítems de una factura en edición
- calculator: subtotal, impuesto y total
- lifecycle: estados y transiciones (overdue es derivado)
- service / router: API sobre el almacenamiento
"""
