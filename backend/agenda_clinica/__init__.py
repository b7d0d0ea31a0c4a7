"""Agenda de clínicas: elegibilidade de agendamentos e layout da agenda diária."""
