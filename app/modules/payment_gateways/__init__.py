"""
Configuración de pasarelas de pago (Stripe, PayPal, Payoneer, Lemon Squeezy, Xoom, Wise).
"""
