"""auth/ -- Authentication and authorization package for TaskGuard.

Layer rule: auth/ imports only stdlib + third-party libraries, plus core/ for
engine setup. It does NOT import from api/ or tasks/.
api/ imports from auth/, not the other way around.
"""
