"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan los adaptadores concretos.
- El Core depende de abstracciones, no de un stack HTTP concreto.
"""
