"""
Pipeline de captura de auditoría.

Importar el coordinator directo desde `auditing.coordinator`: depende de
application.unit_of_work, que a su vez depende de `auditing.field_diff`.
"""
