"""SkyHR attendance package.

Organized by feature modules (attendance, geofence, qr, biometrics, ...) with a
thin Flask controller layer over service/repository layers.
"""
