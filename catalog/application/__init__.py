"""Capa de aplicación: unit of work, captura/flush de auditoría y casos de uso."""
