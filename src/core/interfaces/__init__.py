"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) para handlers HTTP y el lanzador de navegador.
- Permite probar la composición de handlers sin red ni navegador real.
"""
