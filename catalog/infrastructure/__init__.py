"""Adaptadores de infraestructura: pool de DB, publishers RQ, repositorios."""
