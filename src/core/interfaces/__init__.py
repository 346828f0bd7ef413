"""Contratos (Protocol) del Core.

Por qué:
- `ResourceClient` y `SessionStore` los implementan adaptadores concretos.
- El Core (SessionManager, políticas) depende de estas abstracciones, no de
  httpx ni del disco.
"""
