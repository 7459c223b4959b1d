"""Staff roster package.

Organized by feature modules (shifts, assignments, conflicts, attendance)
with a thin Flask controller layer over service/repository layers.
"""
