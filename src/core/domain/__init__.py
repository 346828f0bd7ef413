"""Modelos y tipos del dominio de reclutamiento.

Por qué:
- Aquí viven estados, entidades leídas del backend, filtros y envolturas.
- El dominio no conoce HTTP ni la CLI: solo conceptos del portal (ofertas,
  candidaturas, entrevistas, cartas de oferta).
"""
