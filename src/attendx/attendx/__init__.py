"""AttendX package.

Geofenced lecture attendance: lecturers open sessions guarded by a short key,
students submit presence proofs from a portal, lecturers review rolls and
exam-eligibility audits. Organized by feature modules (sessions, attendance,
eligibility, ...) with a thin Flask controller layer over service/repository
layers.
"""
