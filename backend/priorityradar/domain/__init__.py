"""Dominio: periodos, clasificacion mensual e ICP."""
