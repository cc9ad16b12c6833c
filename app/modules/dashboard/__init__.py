"""
Panel principal: estadísticas financieras y calendario de cobros.
"""
