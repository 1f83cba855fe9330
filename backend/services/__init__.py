"""
Calibration Tracker - Backend Services
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Initial services package

Pure calibration core:
    calibration_calculator, status_classifier, device_view,
    dashboard_stats, report_projector
Collaborators:
    document_store, device_service, auth_service, export_renderers
"""
