"""Biometric attendance package.

Feature modules (devices, attendance, sync, stats) keep the device registry,
the attendance ledger and the reconciliation between them behind a thin
Flask controller layer.
"""
