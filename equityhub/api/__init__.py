"""EquityHub backend API access.

The backend owns storage, price updates, and authentication; this
package only speaks its JSON endpoints under ``/home/api/``.
"""
