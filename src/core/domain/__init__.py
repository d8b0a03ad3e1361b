"""Modelos y errores del dominio.

Por qué:
- Aquí viven las estructuras inmutables de configuración y el plan de
  handlers (Pydantic v2), además de la taxonomía de errores.
- El dominio no abre sockets ni lee ficheros: solo describe qué se sirve.
"""
