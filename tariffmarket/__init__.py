"""
Tariff Market

Coordinación del mercado de tarifas de la simulación: comandos de brokers,
ciclo de vida de tarifas, publicación periódica y suscripciones de clientes.
"""

__version__ = "1.0.0"
