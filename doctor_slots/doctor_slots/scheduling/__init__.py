"""
Scheduling Engine Module

Lógica de agenda de slots, independiente de Frappe:
- Modelo y errores (models.py, exceptions.py)
- Detección de overlaps (overlap.py)
- Generación de slots (slots.py)
- Reglas de reserva (rules.py)
- Máquina de estados (lifecycle.py)
- Audit log (audit.py)
- Recomendación (recommendations.py)
- Acciones y despacho (service.py, dispatch.py)

La integración con DocTypes está en frappe_backend.py.
"""
