"""Priority Compliance Radar: clasificacion mensual de prioridades e ICP."""
