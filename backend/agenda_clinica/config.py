import os
from datetime import time

from .domain.services.temporal import minutos_do_dia, parse_hora

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AGENDA_INICIO_DIA = parse_hora(os.getenv("AGENDA_INICIO_DIA", "06:00")) or time(6, 0)
AGENDA_INICIO_DIA_MINUTOS = minutos_do_dia(AGENDA_INICIO_DIA)
AGENDA_PIXELS_POR_MINUTO = float(os.getenv("AGENDA_PIXELS_POR_MINUTO", "2.0"))
AGENDA_ALTURA_MINIMA = float(os.getenv("AGENDA_ALTURA_MINIMA", "40"))

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("AGENDA_ALLOWED_ORIGINS", "*").split(",") if o.strip()]
